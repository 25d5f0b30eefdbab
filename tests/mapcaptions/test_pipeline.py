"""Tests for the file pipeline — documents, output naming, tree file."""

import json

import pytest
from mapcaptions.config import Settings
from mapcaptions.errors import InputDocumentError
from mapcaptions.pipeline import (
    batch_output_path,
    load_document,
    parse_pair,
    process_batch,
    process_one,
    tree_path_for,
)


EXPECTED_TREE = "\n".join([
    "├── Base/",
    "│   ├── Orthophoto",
    "│   └── 12/",
    "│       └── Transport",
    "│           ├── Roads",
    "│           └── Railways",
    "└── Overlays/",
    "    └── Parcels",
])


class TestLoadDocument:
    """load_document validation."""

    def test_loads_object(self, write_json):
        path = write_json("doc.json", {"groups": []})
        assert load_document(path) == {"groups": []}

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputDocumentError) as info:
            load_document(tmp_path / "nope.json")
        assert info.value.path == tmp_path / "nope.json"

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InputDocumentError, match="invalid JSON"):
            load_document(path)

    def test_non_object_root(self, write_json):
        path = write_json("list.json", [1, 2])
        with pytest.raises(InputDocumentError, match="expected a JSON object"):
            load_document(path)


class TestNaming:
    """Output path helpers."""

    def test_tree_path_replaces_json(self, cfg):
        assert str(tree_path_for("out/map.JSON", cfg)) == "out/map.tree.txt"

    def test_tree_path_appends_otherwise(self, cfg):
        assert str(tree_path_for("out/map.out", cfg)) == "out/map.out.tree.txt"

    def test_parse_pair(self):
        assert parse_pair("map.json:layers.json") == ("map.json", "layers.json")
        assert parse_pair("a:b:c") == ("a", "b")
        assert parse_pair("nocolon") is None
        assert parse_pair(":layers.json") is None
        assert parse_pair("map.json:") is None

    def test_batch_path_beside_map(self, cfg):
        assert batch_output_path("maps/city.json", None, cfg).as_posix() == "maps/city.captions.json"

    def test_batch_path_no_directory(self, cfg):
        assert batch_output_path("city.Json", None, cfg).as_posix() == "city.captions.json"

    def test_batch_path_outdir(self, cfg):
        path = batch_output_path("maps\\city.json", "dist", cfg)
        assert path.as_posix() == "dist/city.captions.json"


class TestProcessOne:
    """End-to-end single pair processing."""

    def test_writes_json_and_tree(self, cfg, tmp_path, write_json, map_doc, layers_doc, capsys):
        write_json("map.json", map_doc)
        write_json("layers.json", layers_doc)

        written = process_one("map.json", "layers.json", "out/result.json", cfg)

        out_file = tmp_path / "out" / "result.json"
        tree_file = tmp_path / "out" / "result.tree.txt"
        assert written == [out_file, tree_file]

        result = json.loads(out_file.read_text(encoding="utf-8"))
        ortho = result["groups"][0]["layers"][0]
        assert list(ortho) == ["id", "infobox", "caption", "opacity"]
        assert ortho["caption"] == "Orthophoto"
        transport = result["groups"][0]["groups"][0]["layers"][0]
        assert transport == {
            "id": "transport", "visible": True,
            "caption": "Transport", "layers": ["Roads", "Railways"],
        }
        assert result["groups"][1]["layers"][0]["caption"] == "Parcels"
        assert result["title"] == "City map"

        assert tree_file.read_text(encoding="utf-8") == EXPECTED_TREE

        out = capsys.readouterr().out.splitlines()
        assert out == [f"Wrote {out_file}", f"Wrote {tree_file}"]

    def test_two_space_indent(self, cfg, tmp_path, write_json, layers_doc):
        write_json("map.json", {"groups": [{"name": "Å", "layers": []}]})
        write_json("layers.json", layers_doc)
        process_one("map.json", "layers.json", "o.json", cfg)
        text = (tmp_path / "o.json").read_text(encoding="utf-8")
        assert text.startswith('{\n  "groups": [\n    {\n      "name": "Å"')

    def test_missing_groups_treated_as_empty(self, cfg, tmp_path, write_json, layers_doc):
        write_json("map.json", {"title": "x"})
        write_json("layers.json", layers_doc)
        process_one("map.json", "layers.json", "o.json", cfg)
        assert json.loads((tmp_path / "o.json").read_text(encoding="utf-8")) == {"title": "x"}
        assert (tmp_path / "o.tree.txt").read_text(encoding="utf-8") == ""

    def test_tree_failure_is_warning(self, cfg, tmp_path, write_json, map_doc, layers_doc):
        write_json("map.json", map_doc)
        write_json("layers.json", layers_doc)
        # A directory in the way makes the tree write fail
        (tmp_path / "o.tree.txt").mkdir()

        written = process_one("map.json", "layers.json", "o.json", cfg)

        assert written == [tmp_path / "o.json"]
        assert (tmp_path / "o.json").exists()

    def test_lone_surrogate_replaced(self, cfg, tmp_path, layers_doc):
        """A lone surrogate escape is written as U+FFFD in both outputs."""
        (tmp_path / "map.json").write_text('{"groups": [{"name": "\\ud800x"}]}', encoding="utf-8")
        (tmp_path / "layers.json").write_text(json.dumps(layers_doc), encoding="utf-8")

        written = process_one("map.json", "layers.json", "o.json", cfg)

        assert written == [tmp_path / "o.json", tmp_path / "o.tree.txt"]
        result = json.loads((tmp_path / "o.json").read_text(encoding="utf-8"))
        assert result["groups"][0]["name"] == "\ufffdx"
        assert (tmp_path / "o.tree.txt").read_text(encoding="utf-8") == "└── \ufffdx/"

    def test_tree_value_error_is_warning(self, cfg, tmp_path, write_json, map_doc, layers_doc, monkeypatch):
        """Any failure while producing the tree text only skips the tree file."""
        def broken(groups):
            raise ValueError("bad tree")

        monkeypatch.setattr("mapcaptions.pipeline.build_tree_lines", broken)
        write_json("map.json", map_doc)
        write_json("layers.json", layers_doc)

        assert process_one("map.json", "layers.json", "o.json", cfg) == [tmp_path / "o.json"]
        assert not (tmp_path / "o.tree.txt").exists()

    def test_tree_disabled(self, tmp_path, write_json, map_doc, layers_doc):
        cfg = Settings(work_dir=tmp_path, write_tree=False)
        write_json("map.json", map_doc)
        write_json("layers.json", layers_doc)
        assert process_one("map.json", "layers.json", "o.json", cfg) == [tmp_path / "o.json"]
        assert not (tmp_path / "o.tree.txt").exists()

    def test_bad_layers_file_aborts(self, cfg, tmp_path, write_json, map_doc):
        write_json("map.json", map_doc)
        (tmp_path / "layers.json").write_text("[", encoding="utf-8")
        with pytest.raises(InputDocumentError):
            process_one("map.json", "layers.json", "o.json", cfg)
        assert not (tmp_path / "o.json").exists()


class TestProcessBatch:
    """Sequential batch processing."""

    def test_outputs_beside_maps(self, cfg, tmp_path, write_json, map_doc, layers_doc):
        write_json("maps/a.json", map_doc)
        write_json("maps/b.json", {"groups": []})
        write_json("layers.json", layers_doc)

        written = process_batch(
            [("maps/a.json", "layers.json"), ("maps/b.json", "layers.json")], None, cfg
        )

        assert written == [
            tmp_path / "maps" / "a.captions.json",
            tmp_path / "maps" / "a.captions.tree.txt",
            tmp_path / "maps" / "b.captions.json",
            tmp_path / "maps" / "b.captions.tree.txt",
        ]

    def test_failure_aborts_remaining_pairs(self, cfg, tmp_path, write_json, map_doc, layers_doc):
        write_json("a.json", map_doc)
        write_json("c.json", map_doc)
        write_json("layers.json", layers_doc)

        with pytest.raises(InputDocumentError):
            process_batch(
                [("a.json", "layers.json"), ("missing.json", "layers.json"), ("c.json", "layers.json")],
                "out",
                cfg,
            )

        assert (tmp_path / "out" / "a.captions.json").exists()
        assert not (tmp_path / "out" / "c.captions.json").exists()
