"""Unit tests for GraphUpdater commits."""

from asset_transcoder.domain import (
    Asset,
    BuildGraph,
    BuildOutput,
    Chunk,
    Entrypoint,
    OrphanPolicy,
    TranscodeMode,
)
from asset_transcoder.domain.models import SIZE_KEY, SOURCE_FILENAME_KEY
from asset_transcoder.engine import GraphUpdater, TranscodeOutcome
from asset_transcoder.exceptions import (
    MISSING_ORIGINAL_ASSET,
    UNATTRIBUTED_ASSET,
    EncodeFailureError,
    NamingCollisionError,
)


def _convert(old: str, new: str, encoded: bytes = b"AVIF", size: int = 10) -> TranscodeOutcome:
    return TranscodeOutcome(old, new, TranscodeMode.CONVERT, size, encoded=encoded)


def _in_place(name: str, encoded: bytes = b"small", size: int = 10) -> TranscodeOutcome:
    return TranscodeOutcome(name, name, TranscodeMode.IN_PLACE, size, encoded=encoded)


class TestCommitInPlace:
    """Tests for in-place commits."""

    def test_updates_content_keeps_name_and_metadata(self) -> None:
        output = BuildOutput({"a.png": Asset("a.png", b"big", {"immutable": True})})
        graph = BuildGraph(chunks=[Chunk("main", files={"a.png"})])

        result = GraphUpdater().commit(output, graph, [_in_place("a.png")])

        assert result.updated == ["a.png"]
        assert result.renames == {}
        assert output["a.png"].content == b"small"
        assert output["a.png"].metadata == {"immutable": True}
        assert graph.membership() == {"main": {"a.png"}}

    def test_missing_original_warns(self) -> None:
        result = GraphUpdater().commit(BuildOutput(), BuildGraph(), [_in_place("gone.png")])

        assert result.updated == []
        assert [w.kind for w in result.warnings] == [MISSING_ORIGINAL_ASSET]
        assert result.warnings[0].asset_name == "gone.png"


class TestCommitConversion:
    """Tests for conversion commits."""

    def test_rename_in_store_and_chunks(self, build_graph: BuildGraph) -> None:
        output = BuildOutput({"logo.png": b"PNGDATA", "app.js": b"js"})

        result = GraphUpdater().commit(
            output, build_graph, [_convert("logo.png", "static/image/logo.avif", size=7)]
        )

        assert result.renames == {"logo.png": "static/image/logo.avif"}
        assert output.names() == ["app.js", "static/image/logo.avif"]
        assert build_graph.membership() == {
            "main": {"app.js", "app.css", "static/image/logo.avif"},
            "vendor": {"vendor.js"},
        }

    def test_converted_asset_metadata(self, build_graph: BuildGraph) -> None:
        output = BuildOutput({"logo.png": Asset("logo.png", b"PNG", {"hash": "abc"})})

        GraphUpdater().commit(output, build_graph, [_convert("logo.png", "logo.avif")])

        metadata = output["logo.avif"].metadata
        assert metadata[SOURCE_FILENAME_KEY] == "logo.png"
        assert metadata[SIZE_KEY] == 4
        assert metadata["hash"] == "abc"

    def test_every_owning_chunk_updated(self) -> None:
        first = Chunk("a", files={"shared.png"})
        second = Chunk("b", files={"shared.png", "b.js"})
        graph = BuildGraph(chunks=[first, second])
        output = BuildOutput({"shared.png": b"P"})

        GraphUpdater().commit(output, graph, [_convert("shared.png", "shared.webp")])

        assert first.files == {"shared.webp"}
        assert second.files == {"shared.webp", "b.js"}

    def test_orphan_attached_to_entrypoint_chunks(self) -> None:
        runtime = Chunk("runtime", files={"runtime.js"})
        lazy = Chunk("lazy", files={"lazy.js"})
        graph = BuildGraph(
            chunks=[runtime, lazy],
            entrypoints={"main": Entrypoint("main", [runtime])},
        )
        output = BuildOutput({"bg.png": b"P"})

        result = GraphUpdater(OrphanPolicy.ENTRYPOINTS).commit(
            output, graph, [_convert("bg.png", "bg.avif")]
        )

        assert runtime.files == {"runtime.js", "bg.avif"}
        assert lazy.files == {"lazy.js"}
        assert result.warnings == []

    def test_orphan_without_entrypoints_warns(self) -> None:
        output = BuildOutput({"bg.png": b"P"})

        result = GraphUpdater().commit(output, BuildGraph(), [_convert("bg.png", "bg.avif")])

        assert "bg.avif" in output
        assert [w.kind for w in result.warnings] == [UNATTRIBUTED_ASSET]

    def test_orphan_left_unattributed(self, build_graph: BuildGraph) -> None:
        output = BuildOutput({"bg.png": b"P"})
        before = build_graph.membership()

        result = GraphUpdater(OrphanPolicy.LEAVE).commit(
            output, build_graph, [_convert("bg.png", "bg.avif")]
        )

        assert build_graph.membership() == before
        assert result.renames == {"bg.png": "bg.avif"}
        assert result.warnings[0].kind == UNATTRIBUTED_ASSET
        assert "bg.avif" in result.warnings[0].message

    def test_existing_target_is_collision(self, build_graph: BuildGraph) -> None:
        output = BuildOutput({"logo.png": b"P", "logo.avif": b"already"})

        result = GraphUpdater().commit(output, build_graph, [_convert("logo.png", "logo.avif")])

        assert result.renames == {}
        assert isinstance(result.errors[0], NamingCollisionError)
        assert output.contents() == {"logo.png": b"P", "logo.avif": b"already"}
        assert "logo.png" in build_graph.chunks_containing("logo.png")[0].files

    def test_missing_original_warns(self, build_graph: BuildGraph) -> None:
        output = BuildOutput()

        result = GraphUpdater().commit(output, build_graph, [_convert("logo.png", "logo.avif")])

        assert len(output) == 0
        assert result.warnings[0].kind == MISSING_ORIGINAL_ASSET

    def test_failed_outcomes_skipped(self, build_graph: BuildGraph) -> None:
        failed = TranscodeOutcome(
            "logo.png",
            "logo.avif",
            TranscodeMode.CONVERT,
            error=EncodeFailureError("bad", "logo.png"),
        )
        output = BuildOutput({"logo.png": b"P"})
        before = build_graph.membership()

        result = GraphUpdater().commit(output, build_graph, [failed])

        assert output.contents() == {"logo.png": b"P"}
        assert build_graph.membership() == before
        assert result.errors == []
