"""Tests for the build namespace."""

import pytest

from gumup.build import BuildNamespace, UnitCache
from gumup.utils.exceptions import CyclicDependencyError, DeclarationError, ResolutionError


def unit_names(build_namespace: BuildNamespace) -> list[str]:
    return [unit.name for unit in build_namespace.resolve_units()]


class TestBuildNamespace:
    """Test ordering of unit files."""

    def test_single_file(self, build_namespace, unit_dir):
        """Test a file without requirements resolves to itself."""
        build_namespace.add(unit_dir / "lib" / "core.js")

        assert build_namespace.resolve() == [str(unit_dir / "lib" / "core.js")]

    def test_dependencies_first(self, build_namespace, unit_dir):
        """Test every file follows the files it requires."""
        build_namespace.add(unit_dir / "app" / "main.js")

        order = unit_names(build_namespace)

        assert sorted(order) == [
            "app.main",
            "app.model.post",
            "app.model.user",
            "lib.core",
            "lib.dom",
        ]
        assert order[-1] == "app.main"
        assert order.index("lib.core") < order.index("app.model.user")
        assert order.index("app.model.user") < order.index("app.model.post")
        assert order.index("lib.core") < order.index("lib.dom")

    def test_only_required_files(self, build_namespace, unit_dir):
        """Test files nothing requires are left out."""
        build_namespace.add(unit_dir / "app" / "model" / "post.js")

        assert unit_names(build_namespace) == ["lib.core", "app.model.user", "app.model.post"]

    def test_several_entries_share_dependencies(self, build_namespace, unit_dir):
        """Test shared dependencies appear once."""
        build_namespace.add(unit_dir / "lib" / "dom.js")
        build_namespace.add(unit_dir / "app" / "model" / "user.js")

        order = unit_names(build_namespace)

        assert order.count("lib.core") == 1
        assert order[0] == "lib.core"
        assert set(order) == {"lib.core", "lib.dom", "app.model.user"}

    def test_add_same_file_twice(self, build_namespace, unit_dir):
        """Test adding a file twice registers one entry."""
        build_namespace.add(unit_dir / "lib" / "core.js")
        build_namespace.add(unit_dir / "lib" / "core.js")

        assert len(build_namespace.units) == 1

    def test_entry_that_is_also_a_dependency(self, build_namespace, unit_dir):
        """Test an entry required by another entry still follows its dependencies."""
        build_namespace.add(unit_dir / "lib" / "core.js")
        build_namespace.add(unit_dir / "lib" / "dom.js")

        assert unit_names(build_namespace) == ["lib.core", "lib.dom"]

    def test_missing_dependency(self, tmp_path, make_unit):
        """Test a requirement without a file fails."""
        entry = make_unit(tmp_path, "app", ["lib.missing"])
        build = BuildNamespace(UnitCache([tmp_path]))
        build.add(entry)

        with pytest.raises(ResolutionError, match="Invalid dependency 'lib.missing'"):
            build.resolve()

    def test_cycle(self, tmp_path, make_unit):
        """Test cyclic files fail."""
        entry = make_unit(tmp_path, "a", ["b"])
        make_unit(tmp_path, "b", ["a"])
        build = BuildNamespace(UnitCache([tmp_path]))
        build.add(entry)

        with pytest.raises(CyclicDependencyError):
            build.resolve()

    def test_wildcard_cycle_through_container(self, tmp_path, make_unit):
        """Test a container requiring its nested units that require it back."""
        entry = make_unit(tmp_path, "app", ["app.*"])
        make_unit(tmp_path, "app.view", ["app"])
        build = BuildNamespace(UnitCache([tmp_path]))
        build.add(entry)

        with pytest.raises(CyclicDependencyError):
            build.resolve()

    def test_invalid_entry_header(self, tmp_path):
        """Test a file without a unit directive can't be added."""
        path = tmp_path / "plain.js"
        path.write_text("var x;\n")
        build = BuildNamespace(UnitCache([tmp_path]))

        with pytest.raises(DeclarationError, match="No unit declaration"):
            build.add(path)

    def test_graph_property(self, build_namespace, unit_dir):
        """Test the graph is resolved on access."""
        build_namespace.add(unit_dir / "lib" / "dom.js")

        graph = build_namespace.graph

        assert set(graph.nodes) == {"lib.core", "lib.dom"}
        assert graph.roots == ["lib.dom"]
        assert build_namespace.graph is graph


class TestConcatenate:
    """Test concatenation of ordered files."""

    def test_concatenate(self, tmp_path, make_unit):
        """Test files are joined in dependency order."""
        make_unit(tmp_path, "base", body="BASE\n")
        entry = make_unit(tmp_path, "top", ["base"], body="TOP\n")
        build = BuildNamespace(UnitCache([tmp_path]))
        build.add(entry)

        output = build.concatenate(separator="--\n", banner="/* banner */\n")

        assert output.startswith("/* banner */\n// @unit base\n")
        assert output.index("BASE") < output.index("--\n") < output.index("TOP")

    def test_concatenate_default_separator(self, tmp_path, make_unit):
        """Test the default separator is a newline."""
        path = make_unit(tmp_path, "only", body="ONLY\n")
        build = BuildNamespace(UnitCache([tmp_path]))
        build.add(path)

        assert build.concatenate() == path.read_text()
