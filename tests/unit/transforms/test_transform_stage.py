"""Unit tests for the streaming transform stage."""

from __future__ import annotations

from transforms.cell_rewriter import CellRewriter
from transforms.transform_stage import TransformStage, transform_stream

EXPECTED_SAMPLE_OUTPUT = b"id,name\nx-1,x-alice\nx-2,\n"


def _run(chunks: list[bytes]) -> tuple[bytes, TransformStage]:
    stage = TransformStage(CellRewriter("x-"))
    return b"".join(transform_stream(chunks, stage)), stage


def _split(data: bytes, size: int) -> list[bytes]:
    return [data[index : index + size] for index in range(0, len(data), size)]


def test_sample_rows_are_rewritten(sample_csv: bytes) -> None:
    """Header stays verbatim and blank cells are not marked."""
    output, stage = _run([sample_csv])

    assert output == EXPECTED_SAMPLE_OUTPUT
    assert stage.records_processed == 2


def test_mid_row_chunking_matches_single_chunk() -> None:
    """Chunks cut inside the header and a row should give identical output."""
    output, _ = _run([b"id,na", b"me\n1,al", b"ice\n2,\n"])

    assert output == EXPECTED_SAMPLE_OUTPUT


def test_output_is_independent_of_chunk_size() -> None:
    """One-byte, N-byte, and whole-input chunking must be byte-identical."""
    data = b"id,name,city\n1,alice,\n2, ,paris\n3,carol,rome\n4,,\n5,eve,oslo"
    whole, _ = _run([data])
    single_bytes, _ = _run(_split(data, 1))
    five_bytes, _ = _run(_split(data, 5))

    assert whole == single_bytes == five_bytes


def test_unterminated_last_row_gets_terminator() -> None:
    """The flushed fragment is rewritten and terminated like other rows."""
    output, stage = _run([b"id\n1\n2"])

    assert output == b"id\nx-1\nx-2\n"
    assert stage.records_processed == 2


def test_empty_input_produces_empty_output() -> None:
    """Zero chunks yield zero bytes and zero records."""
    output, stage = _run([])

    assert output == b""
    assert stage.records_processed == 0
    assert stage.state == "awaiting_header"


def test_state_moves_to_streaming_after_first_record() -> None:
    """The header is consumed exactly once."""
    stage = TransformStage()

    assert stage.process(b"id,name\n") == b"id,name\n"
    assert stage.state == "streaming"
    assert stage.process(b"id,name\n") == b"x-id,x-name\n"


def test_field_and_record_counts_are_preserved() -> None:
    """No record or field is dropped by the transform."""
    rows = [f"{index},name-{index},,v{index}" for index in range(200)]
    data = ("a,b,c,d\n" + "\n".join(rows) + "\n").encode("utf-8")

    output, stage = _run(_split(data, 13))
    output_rows = output.decode("utf-8").split("\n")[1:-1]

    assert stage.records_processed == len(rows)
    assert len(output_rows) == len(rows)
    assert all(len(row.split(",")) == 4 for row in output_rows)
