"""Tests for import specifier resolution and file discovery."""
from pathlib import Path

import pytest

from impact_mapper.analyzer.discovery import list_source_files
from impact_mapper.analyzer.resolver import ModuleResolver, get_module_name, resolve_import


@pytest.fixture
def project(make_project):
    return make_project({
        'main.js': "import './a';\n",
        'a.js': '',
        'sub/deep/entry.js': '',
        'shared/helper.ts': '',
    })


class TestRelativeResolution:

    def test_resolves_missing_extension(self, project):
        resolved = resolve_import('./a', project / 'main.js', project)
        assert resolved == project / 'a.js'

    def test_resolves_parent_directory(self, project):
        resolved = resolve_import('../../shared/helper', project / 'sub' / 'deep' / 'entry.js', project)
        assert resolved == project / 'shared' / 'helper.ts'

    def test_exact_file_wins_over_extensions(self, project):
        (project / 'c').write_text('')
        (project / 'c.js').write_text('')
        assert resolve_import('./c', project / 'main.js', project) == project / 'c'

    def test_exact_path_with_extension(self, project):
        (project / 'data.json').write_text('{}')
        assert resolve_import('./data.json', project / 'main.js', project) == project / 'data.json'

    def test_absolute_specifier(self, project):
        target = project / 'a.js'
        assert resolve_import(str(target), project / 'main.js', project) == target


class TestExtensionOrder:
    """Extensions are probed as .js, .jsx, .ts, .tsx, .mjs, .cjs."""

    @pytest.mark.parametrize('present, expected', [
        (['.cjs', '.mjs', '.tsx', '.ts', '.jsx', '.js'], '.js'),
        (['.cjs', '.mjs', '.tsx', '.ts', '.jsx'], '.jsx'),
        (['.cjs', '.mjs', '.tsx', '.ts'], '.ts'),
        (['.cjs', '.mjs', '.tsx'], '.tsx'),
        (['.cjs', '.mjs'], '.mjs'),
        (['.cjs'], '.cjs'),
    ])
    def test_file_form(self, project, present, expected):
        for ext in present:
            (project / f'mod{ext}').write_text('')
        assert resolve_import('./mod', project / 'main.js', project) == project / f'mod{expected}'

    @pytest.mark.parametrize('present, expected', [
        (['.mjs', '.ts', '.js'], '.js'),
        (['.mjs', '.tsx', '.ts'], '.ts'),
        (['.cjs', '.mjs'], '.mjs'),
    ])
    def test_index_form(self, project, present, expected):
        lib = project / 'lib'
        lib.mkdir()
        for ext in present:
            (lib / f'index{ext}').write_text('')
        assert resolve_import('./lib', project / 'main.js', project) == lib / f'index{expected}'

    def test_file_form_beats_index_form(self, project):
        (project / 'lib').mkdir()
        (project / 'lib' / 'index.js').write_text('')
        (project / 'lib.cjs').write_text('')
        assert resolve_import('./lib', project / 'main.js', project) == project / 'lib.cjs'


class TestUnresolved:

    @pytest.mark.parametrize('specifier', ['lodash', 'react-dom/client', '@scope/pkg', 'fs'])
    def test_bare_specifiers_are_external(self, project, specifier):
        assert resolve_import(specifier, project / 'main.js', project) is None

    def test_missing_relative_file(self, project):
        assert resolve_import('./missing', project / 'main.js', project) is None

    def test_directory_without_index(self, project):
        (project / 'empty').mkdir()
        assert resolve_import('./empty', project / 'main.js', project) is None

    def test_empty_specifier(self, project):
        assert ModuleResolver(project).resolve('', project / 'main.js') is None


def test_resolution_is_deterministic(project):
    resolver = ModuleResolver(project)
    first = resolver.resolve('./a', project / 'main.js')
    second = resolver.resolve('./a', project / 'main.js')
    assert first == second == project / 'a.js'


def test_module_name_is_root_relative(project):
    assert get_module_name(project / 'sub' / 'deep' / 'entry.js', project) == 'sub/deep/entry.js'
    assert ModuleResolver(project).module_name(project / 'a.js') == 'a.js'


class TestDiscovery:

    def test_lists_source_files_in_sorted_order(self, make_project):
        root = make_project({
            'b.js': '',
            'a.ts': '',
            'lib/c.jsx': '',
            'lib/d.mjs': '',
            'e.cjs': '',
            'f.tsx': '',
            'README.md': '',
            'data.json': '',
        })
        files = [get_module_name(p, root) for p in list_source_files(root)]
        assert files == ['a.ts', 'b.js', 'e.cjs', 'f.tsx', 'lib/c.jsx', 'lib/d.mjs']

    def test_skips_dependency_build_and_vcs_directories(self, make_project):
        root = make_project({
            'src/app.js': '',
            'node_modules/pkg/index.js': '',
            'dist/bundle.js': '',
            'build/out.js': '',
            '.git/hooks/hook.js': '',
        })
        files = [get_module_name(p, root) for p in list_source_files(root)]
        assert files == ['src/app.js']

    def test_extra_exclude_dirs(self, make_project):
        root = make_project({'src/app.js': '', 'vendor/lib.js': ''})
        files = [get_module_name(p, root) for p in list_source_files(root, ['vendor'])]
        assert files == ['src/app.js']

    def test_returns_absolute_paths(self, make_project):
        root = make_project({'app.js': ''})
        files = list_source_files(root)
        assert files == [root / 'app.js']
        assert all(Path(f).is_absolute() for f in files)

    def test_symlinked_directories_are_not_followed(self, make_project):
        root = make_project({'src/app.js': '', 'src/lib/util.js': ''})
        (root / 'src' / 'lib' / 'loop').symlink_to(root / 'src', target_is_directory=True)
        (root / 'shared').symlink_to(root / 'src' / 'lib', target_is_directory=True)

        files = [get_module_name(p, root) for p in list_source_files(root)]
        assert files == ['src/app.js', 'src/lib/util.js']
