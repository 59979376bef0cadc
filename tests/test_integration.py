"""Integration tests for tiny-graphviz."""

import json
from unittest.mock import MagicMock, patch

import pytest

import main as cli
from tiny_graphviz import Config, Graph, InvalidTargetError
from tiny_graphviz.graph import GraphStorage
from tiny_graphviz.visualization import PyVisVisualizer


@pytest.fixture
def config(tmp_path):
    """Create a config writing into a temporary directory."""
    return Config(output_dir=str(tmp_path))


@pytest.fixture
def story_graph(config):
    """Create a small graph with edges and a cluster."""
    graph = Graph(config=config)
    n1 = graph.add_node(label="Start")
    n2 = graph.add_node(label="End")
    n3 = graph.add_node(label="Epilogue")
    graph.add_edge(n1, n2)
    graph.add_edge(n1, n3, style="dashed")
    graph.add_cluster([n1, n2])
    return graph


class TestGraphStorageIntegration:
    """Tests for graph storage integration."""

    def test_save_and_load_json(self, story_graph, tmp_path):
        """Test saving and loading a graph as JSON."""
        path = tmp_path / "graphs" / "story.json"

        story_graph.dump(path)

        # Verify file exists and is valid JSON
        assert path.exists()
        with open(path) as f:
            data = json.load(f)
            assert set(data) == {"nodes", "edges", "clusters"}
            assert [n["attrs"]["label"] for n in data["nodes"]] == ["Start", "End", "Epilogue"]

        loaded = Graph.load(path, config=story_graph.config)

        assert loaded.snapshot() == story_graph.snapshot()
        assert loaded.write() == story_graph.write()

    def test_loaded_graph_allocates_fresh_ids(self, story_graph, tmp_path):
        """Test ids allocated after loading exceed every loaded id."""
        path = tmp_path / "story.json"
        GraphStorage().save_json(story_graph.snapshot(), path)

        loaded = Graph.load(path, config=story_graph.config)
        node = loaded.add_node(label="Appendix")

        assert node.id > max(story_graph.get()["clusters"])

    def test_failed_dump_keeps_previous_file(self, story_graph, tmp_path):
        """Test an unencodable attribute leaves the earlier dump loadable."""
        path = tmp_path / "story.json"
        story_graph.dump(path)
        before = path.read_text(encoding="utf-8")
        node_id = min(story_graph.get()["nodes"])
        story_graph.update(node_id, weight=object())

        with pytest.raises(TypeError):
            story_graph.dump(path)

        assert path.read_text(encoding="utf-8") == before
        assert len(Graph.load(path, config=story_graph.config).get()["nodes"]) == 3


class TestGraph:
    """Tests for the Graph entry point."""

    def test_write_empty(self, config):
        """Test an empty graph writes the bare digraph."""
        assert Graph(config=config).write() == "digraph G {\n\n\n}"

    def test_write_uses_graph_name(self, tmp_path):
        """Test the configured graph name is used in the header."""
        graph = Graph(config=Config(graph_name="Flow", output_dir=str(tmp_path)))

        assert graph.write().startswith("digraph Flow {")

    def test_update_cluster_raises(self, story_graph):
        """Test cluster attribute updates are rejected."""
        cluster_id = next(iter(story_graph.get()["clusters"]))

        with pytest.raises(InvalidTargetError):
            story_graph.update(cluster_id, color="red")

    def test_save_default_location(self, story_graph, tmp_path):
        """Test save writes G.dot by default."""
        path = story_graph.save()

        assert path == tmp_path / "G.dot"
        assert path.read_text(encoding="utf-8") == story_graph.write()

    def test_save_custom_name(self, story_graph, tmp_path):
        """Test save honours the given base name."""
        path = story_graph.save("my_graph")

        assert path == tmp_path / "my_graph.dot"
        assert not (tmp_path / "G.dot").exists()

    @patch("tiny_graphviz.dot.compiler.subprocess.run")
    def test_compile_default(self, mock_run, story_graph, tmp_path):
        """Test compile writes G.dot and asks dot for G.pdf."""
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")

        output = story_graph.compile()

        assert output == tmp_path / "G.pdf"
        assert (tmp_path / "G.dot").exists()

    @patch("tiny_graphviz.dot.compiler.subprocess.run")
    def test_compile_name_and_format(self, mock_run, story_graph, tmp_path):
        """Test compile with a base name and PNG format."""
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")

        output = story_graph.compile("my_graph", "png")

        assert output == tmp_path / "my_graph.png"
        assert (tmp_path / "my_graph.dot").exists()
        assert not (tmp_path / "G.dot").exists()

    @patch("tiny_graphviz.dot.compiler.subprocess.run")
    def test_compile_format_only(self, mock_run, story_graph, tmp_path):
        """Test a format name alone keeps the default base name."""
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")

        output = story_graph.compile("png")

        assert output == tmp_path / "G.png"
        assert "-Tpng" in mock_run.call_args[0][0]

    def test_get_stats(self, story_graph):
        """Test stats count entities and dangling references."""
        first_node = min(story_graph.get()["nodes"])
        story_graph.remove(first_node)

        stats = story_graph.get_stats()

        assert stats == {
            "nodes": 2,
            "edges": 2,
            "clusters": 1,
            "dangling_edges": 2,
            "dangling_cluster_members": 1,
        }


class TestConfig:
    """Tests for configuration loading."""

    def test_defaults(self, tmp_path, monkeypatch):
        """Test defaults apply without a config file."""
        for name in ("GRAPH_NAME", "GRAPH_OUTPUT_DIR", "GRAPH_FORMAT", "GRAPHVIZ_DOT"):
            monkeypatch.delenv(name, raising=False)

        config = Config.from_yaml(str(tmp_path / "missing.yaml"))

        assert config == Config()

    def test_yaml_and_env_override(self, tmp_path, monkeypatch):
        """Test YAML values load and environment variables win."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "graph:\n  name: Flow\noutput:\n  dir: build\n  format: PNG\n",
            encoding="utf-8",
        )
        monkeypatch.delenv("GRAPH_NAME", raising=False)
        monkeypatch.delenv("GRAPH_FORMAT", raising=False)
        monkeypatch.setenv("GRAPH_OUTPUT_DIR", "out")
        monkeypatch.setenv("GRAPHVIZ_DOT", "/usr/local/bin/dot")

        config = Config.from_yaml(str(path))

        assert config.graph_name == "Flow"
        assert config.default_format == "png"
        assert config.output_dir == "out"
        assert config.dot_command == "/usr/local/bin/dot"


class TestVisualizer:
    """Tests for the PyVis preview."""

    @patch("tiny_graphviz.visualization.pyvis_visualizer.Network")
    def test_generate_skips_dangling_edges(self, mock_network_cls, story_graph):
        """Test nodes and live edges are added to the network."""
        nodes = sorted(story_graph.get()["nodes"])
        story_graph.remove(nodes[2])
        network = mock_network_cls.return_value

        viz = PyVisVisualizer(story_graph.snapshot())
        viz.generate()

        added_nodes = [c.args[0] for c in network.add_node.call_args_list]
        added_edges = [c.args[:2] for c in network.add_edge.call_args_list]
        assert added_nodes == nodes[:2]
        assert added_edges == [(nodes[0], nodes[1])]
        assert network.add_node.call_args_list[0].kwargs["label"] == "Start"

    @patch("tiny_graphviz.visualization.pyvis_visualizer.Network")
    def test_cluster_filter(self, mock_network_cls, story_graph):
        """Test the cluster filter keeps only cluster members."""
        cluster_id = next(iter(story_graph.get()["clusters"]))
        network = mock_network_cls.return_value

        viz = PyVisVisualizer(story_graph.snapshot(), cluster_ids=[cluster_id])
        viz.generate()

        assert network.add_node.call_count == 2

    def test_save_before_generate(self, story_graph):
        """Test saving requires a generated network."""
        with pytest.raises(ValueError):
            PyVisVisualizer(story_graph.snapshot()).save("out.html")


class TestCli:
    """Tests for the command line entry point."""

    def test_render(self, story_graph, tmp_path, capsys, monkeypatch):
        """Test render prints the DOT source of a stored graph."""
        monkeypatch.setenv("GRAPH_NAME", "G")
        path = tmp_path / "story.json"
        story_graph.dump(path)

        cli.main(["render", str(path)])

        assert capsys.readouterr().out.strip() == story_graph.write()

    def test_missing_file(self, tmp_path, capsys):
        """Test errors exit with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["stats", str(tmp_path / "missing.json")])

        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    @patch("tiny_graphviz.dot.compiler.subprocess.run")
    def test_compile_name_that_looks_like_format(self, mock_run, story_graph, tmp_path, monkeypatch):
        """Test an explicit --name is used even when it matches a format."""
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        monkeypatch.setenv("GRAPH_OUTPUT_DIR", str(tmp_path))
        monkeypatch.setenv("GRAPH_FORMAT", "pdf")
        path = tmp_path / "g.json"
        story_graph.dump(path)

        cli.main(["compile", str(path), "-n", "svg"])

        assert (tmp_path / "svg.dot").exists()
        assert not (tmp_path / "G.dot").exists()
        assert mock_run.call_args[0][0][1] == "-Tpdf"
        assert mock_run.call_args[0][0][-1] == str(tmp_path / "svg.pdf")
