"""Standalone HTML export of the dependency graph (D3 force layout)."""
import html
import json
from pathlib import Path
from typing import Dict, Optional

from ..analyzer.graph_builder import DependencyGraph
from ..analyzer.impact import ImpactReport
from ..config import DEFAULT_D3_URL

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Impact Mapper - Dependency Graph</title>
<style>
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body {
    background: #0d1117; color: #c9d1d9; overflow: hidden;
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
  }
  #header {
    position: fixed; top: 0; left: 0; right: 0; z-index: 100;
    background: #161b22; border-bottom: 1px solid #30363d; padding: 16px 24px;
  }
  #header h1 { font-size: 18px; font-weight: 600; color: #58a6ff; }
  #header .subtitle { font-size: 13px; color: #8b949e; }
  #legend {
    position: fixed; bottom: 20px; left: 20px; z-index: 100;
    background: #161b22; border: 1px solid #30363d; border-radius: 8px;
    padding: 12px 16px; font-size: 12px;
  }
  #legend div { margin: 4px 0; display: flex; align-items: center; gap: 8px; }
  #legend .dot { width: 12px; height: 12px; border-radius: 50%; display: inline-block; }
  #tooltip {
    position: fixed; display: none; z-index: 200; pointer-events: none;
    background: #1c2128; border: 1px solid #30363d; border-radius: 8px;
    padding: 12px 16px; font-size: 13px; max-width: 320px;
  }
  #tooltip .tt-title { font-weight: 600; color: #58a6ff; margin-bottom: 6px; }
  #tooltip .tt-imports { color: #8b949e; }
  svg { width: 100vw; height: 100vh; }
  .link { stroke-opacity: 0.4; }
  .link:hover { stroke-opacity: 1; }
  .node-label {
    font-size: 11px; fill: #c9d1d9; pointer-events: none;
    text-anchor: middle; dominant-baseline: central;
  }
</style>
</head>
<body>
<div id="header">
  <h1>Impact Mapper</h1>
  <div class="subtitle">__SUBTITLE__</div>
</div>
<div id="legend">
  <div><span class="dot" style="background:#58a6ff;"></span> Normal module</div>
  <div><span class="dot" style="background:#f85149;"></span> Source of change</div>
  <div><span class="dot" style="background:#d29922;"></span> Affected module</div>
  <div style="color:#8b949e; margin-top:8px;">Drag nodes, scroll to zoom</div>
</div>
<div id="tooltip"><div class="tt-title"></div><div class="tt-imports"></div></div>
<svg></svg>
<script src="__D3_URL__"></script>
<script>
const data = __GRAPH_DATA__;
const colors = { normal: '#58a6ff', source: '#f85149', affected: '#d29922' };
const svg = d3.select('svg');
const width = window.innerWidth;
const height = window.innerHeight;

const simulation = d3.forceSimulation(data.nodes)
  .force('link', d3.forceLink(data.links).id(d => d.id).distance(140))
  .force('charge', d3.forceManyBody().strength(-400))
  .force('center', d3.forceCenter(width / 2, height / 2))
  .force('collision', d3.forceCollide().radius(50));

const g = svg.append('g');
svg.call(d3.zoom().scaleExtent([0.2, 5]).on('zoom', (event) => g.attr('transform', event.transform)));

svg.append('defs').append('marker')
  .attr('id', 'arrow').attr('viewBox', '0 -5 10 10')
  .attr('refX', 28).attr('refY', 0)
  .attr('markerWidth', 6).attr('markerHeight', 6)
  .attr('orient', 'auto')
  .append('path').attr('d', 'M0,-5L10,0L0,5').attr('fill', '#30363d');

const link = g.append('g').selectAll('line')
  .data(data.links).join('line')
  .attr('class', 'link')
  .attr('stroke', '#30363d').attr('stroke-width', 1.5)
  .attr('marker-end', 'url(#arrow)');

const tooltip = d3.select('#tooltip');
link.on('mouseover', (event, d) => {
  tooltip.style('display', 'block')
    .style('left', (event.pageX + 12) + 'px')
    .style('top', (event.pageY - 12) + 'px');
  tooltip.select('.tt-title').text(d.source.id + ' -> ' + d.target.id);
  tooltip.select('.tt-imports').text(d.imports.length ? 'Imports: ' + d.imports.join(', ') : '');
}).on('mouseout', () => tooltip.style('display', 'none'));

const node = g.append('g').selectAll('g')
  .data(data.nodes).join('g')
  .call(d3.drag()
    .on('start', (event, d) => { if (!event.active) simulation.alphaTarget(0.3).restart(); d.fx = d.x; d.fy = d.y; })
    .on('drag', (event, d) => { d.fx = event.x; d.fy = event.y; })
    .on('end', (event, d) => { if (!event.active) simulation.alphaTarget(0); d.fx = null; d.fy = null; }));

node.append('circle')
  .attr('r', d => d.group === 'source' ? 20 : d.group === 'affected' ? 16 : 14)
  .attr('fill', d => colors[d.group])
  .attr('opacity', 0.85);

node.append('text')
  .attr('class', 'node-label')
  .attr('dy', d => (d.group === 'source' ? 32 : 28))
  .text(d => d.id);

simulation.on('tick', () => {
  link.attr('x1', d => d.source.x).attr('y1', d => d.source.y)
      .attr('x2', d => d.target.x).attr('y2', d => d.target.y);
  node.attr('transform', d => 'translate(' + d.x + ',' + d.y + ')');
});
</script>
</body>
</html>
"""


def build_graph_data(graph: DependencyGraph, impact: Optional[ImpactReport] = None) -> Dict:
    """D3 payload: nodes grouped normal/source/affected, links carry imported names."""
    source_module = impact.entity.module if impact else None
    affected = set(impact.affected_modules) if impact else set()

    def group(module_id: str) -> str:
        if module_id == source_module:
            return 'source'
        if module_id in affected:
            return 'affected'
        return 'normal'

    return {
        'nodes': [{'id': n.id, 'group': group(n.id)} for n in graph.nodes],
        'links': [{'source': e.source, 'target': e.target, 'imports': list(e.imports)} for e in graph.edges],
        'impactEntity': impact.entity.name if impact else None,
    }


def generate_html_graph(graph: DependencyGraph, output_path: str | Path,
                        impact: Optional[ImpactReport] = None,
                        d3_url: str = DEFAULT_D3_URL) -> Path:
    """Write an interactive HTML page for the dependency graph.

    Args:
        graph: Dependency graph to draw
        output_path: Destination HTML file
        impact: Optional impact report whose source and affected modules are highlighted
        d3_url: URL of the D3 v7 script

    Returns:
        The resolved destination path
    """
    data = build_graph_data(graph, impact)
    # '</' inside the inline script would terminate it early
    graph_json = json.dumps(data).replace('</', '<\\/')

    if impact:
        subtitle = f"Impact analysis for <strong>{html.escape(impact.entity.name)}</strong>"
    else:
        subtitle = "Full dependency graph"

    page = (HTML_TEMPLATE
            .replace('__SUBTITLE__', subtitle)
            .replace('__D3_URL__', html.escape(d3_url, quote=True))
            .replace('__GRAPH_DATA__', graph_json))

    output_path = Path(output_path).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(page, encoding='utf-8')
    return output_path
