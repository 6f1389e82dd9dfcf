"""Tests for import extraction and the module dependency graph."""
from impact_mapper.analyzer.graph_builder import DependencyGraphBuilder
from impact_mapper.analyzer.import_tracker import ImportExtractor
from impact_mapper.analyzer.parser import LanguageParser
from impact_mapper.analyzer.resolver import ModuleResolver


def _imports(root, rel_path, source):
    file_path = root / rel_path
    tree = LanguageParser.from_file_extension(file_path).parse_source(source.encode('utf-8'))
    return ImportExtractor(ModuleResolver(root)).extract_imports(tree, file_path)


class TestImportExtractor:

    def test_es_import_forms(self, make_project):
        root = make_project({'lib.js': "export default 1;\n"})
        source = (
            "import lib, { a, b as c } from './lib';\n"
            "import * as ns from './lib';\n"
            "import './lib';\n"
        )
        imports = _imports(root, 'main.js', source)

        assert [imp.imported_names for imp in imports] == [['default', 'a', 'b'], ['*'], []]
        assert [imp.line for imp in imports] == [1, 2, 3]
        assert all(imp.resolved_path == root / 'lib.js' for imp in imports)

    def test_require_forms(self, make_project):
        root = make_project({'lib.js': "module.exports = {};\n"})
        source = (
            "const lib = require('./lib');\n"
            "const { x, y: renamed, z = 1 } = require('./lib');\n"
            "require('./lib');\n"
        )
        imports = _imports(root, 'main.js', source)

        assert [imp.imported_names for imp in imports] == [['lib'], ['x', 'y', 'z'], []]
        assert all(imp.specifier == './lib' for imp in imports)

    def test_external_and_dynamic_specifiers(self, make_project):
        root = make_project({})
        source = (
            "import React from 'react';\n"
            "const fs = require('fs');\n"
            "const dyn = require(name);\n"
            "const tpl = require(`./lib`);\n"
        )
        imports = _imports(root, 'main.js', source)

        assert [(imp.specifier, imp.resolved_path) for imp in imports] == [
            ('react', None),
            ('fs', None),
        ]


class TestDependencyGraph:

    def test_sample_project_graph(self, sample_project):
        graph = DependencyGraphBuilder(sample_project).build()

        assert [node.id for node in graph.nodes] == [
            'api.js', 'broken.js', 'legacy/report.js', 'services.js', 'utils.js',
        ]
        assert [(e.source, e.target, e.imports) for e in graph.edges] == [
            ('api.js', 'utils.js', ['calculateTotal']),
            ('services.js', 'utils.js', ['calculateTotal', 'Cart']),
        ]

    def test_node_file_is_absolute(self, sample_project):
        graph = DependencyGraphBuilder(sample_project).build()
        assert graph.nodes[-1].file == str(sample_project / 'utils.js')

    def test_every_edge_target_is_a_node(self, make_project):
        root = make_project({
            'a.js': "import x from './missing';\nimport y from 'lodash';\nimport z from './b';\n",
            'b.js': "export default 1;\n",
            'node_modules/pkg/index.js': "export default 1;\n",
            'c.js': "import p from './node_modules/pkg';\n",
        })
        graph = DependencyGraphBuilder(root).build()
        node_ids = {node.id for node in graph.nodes}

        assert [(e.source, e.target) for e in graph.edges] == [('a.js', 'b.js')]
        assert all(e.target in node_ids for e in graph.edges)

    def test_repeated_imports_are_parallel_edges(self, make_project):
        root = make_project({
            'a.js': "import { x } from './b';\nimport { y } from './b';\n",
            'b.js': "export const x = 1, y = 2;\n",
        })
        graph = DependencyGraphBuilder(root).build()

        assert [(e.source, e.target, e.imports) for e in graph.edges] == [
            ('a.js', 'b.js', ['x']),
            ('a.js', 'b.js', ['y']),
        ]
        assert graph.to_networkx().number_of_edges('a.js', 'b.js') == 2

    def test_cycles_are_kept(self, make_project):
        root = make_project({
            'a.js': "import { b } from './b';\nexport const a = 1;\n",
            'b.js': "import { a } from './a';\nexport const b = 1;\n",
        })
        graph = DependencyGraphBuilder(root).build()

        assert [(e.source, e.target) for e in graph.edges] == [('a.js', 'b.js'), ('b.js', 'a.js')]

    def test_index_and_typescript_resolution(self, make_project):
        root = make_project({
            'app.ts': "import { util } from './lib';\nimport { Button } from './ui/Button';\n",
            'lib/index.ts': "export const util = 1;\n",
            'ui/Button.tsx': "export const Button = () => <button />;\n",
        })
        graph = DependencyGraphBuilder(root).build()

        assert [(e.source, e.target) for e in graph.edges] == [
            ('app.ts', 'lib/index.ts'),
            ('app.ts', 'ui/Button.tsx'),
        ]

    def test_extra_exclude_dirs(self, make_project):
        root = make_project({
            'a.js': "import g from './generated/g';\n",
            'generated/g.js': "export default 1;\n",
        })
        graph = DependencyGraphBuilder(root, extra_exclude_dirs=['generated']).build()

        assert [node.id for node in graph.nodes] == ['a.js']
        assert graph.edges == []

    def test_networkx_view(self, sample_project):
        nx_graph = DependencyGraphBuilder(sample_project).build().to_networkx()

        assert set(nx_graph.nodes) == {'api.js', 'broken.js', 'legacy/report.js', 'services.js', 'utils.js'}
        assert nx_graph.in_degree('utils.js') == 2
        assert nx_graph.out_degree('broken.js') == 0

    def test_to_dict(self, sample_project):
        data = DependencyGraphBuilder(sample_project).build().to_dict()

        assert data['nodes'][0] == {'id': 'api.js', 'file': str(sample_project / 'api.js')}
        assert data['edges'][0] == {'from': 'api.js', 'to': 'utils.js', 'imports': ['calculateTotal']}
