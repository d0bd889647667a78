from __future__ import annotations

import PIL.Image
import pytest

import viewer


def test_renders_default_view(tmp_path) -> None:
    output = tmp_path / "view.png"

    status = viewer.main(["--width", "16", "--height", "8", "--output", str(output)])

    assert status == 0
    with PIL.Image.open(output) as image:
        assert image.size == (16, 8)
        assert image.mode == "RGBA"


def test_clicks_recolor_and_gif(tmp_path) -> None:
    output = tmp_path / "zoomed"
    gif = tmp_path / "frames.gif"

    status = viewer.main(
        [
            "--width", "16",
            "--height", "8",
            "--click", "8", "4",
            "--click", "5", "3",
            "--recolor-outside", "#ff8800",
            "--gif", str(gif),
            "--output", str(output),
        ]
    )

    assert status == 0
    assert (tmp_path / "zoomed.png").is_file()
    assert gif.is_file()


def test_recolor_only_changes_colors(tmp_path) -> None:
    plain = tmp_path / "plain.png"
    recolored = tmp_path / "recolored.png"
    base = ["--width", "8", "--height", "4", "--outside-color", "#000000"]

    assert viewer.main([*base, "--output", str(plain)]) == 0
    assert viewer.main([*base, "--recolor-outside", "#000000", "--output", str(recolored)]) == 0

    with PIL.Image.open(plain) as a, PIL.Image.open(recolored) as b:
        assert a.tobytes() == b.tobytes()


@pytest.mark.parametrize(
    "args",
    [
        ["--top", "-3"],
        ["--width", "0"],
        ["--inside-color", "not-a-color"],
        ["--zoom-rate", "1"],
        ["--inside-offset", "nan"],
        ["--inside-offset", "-1"],
        ["--gif", "movie.mp4"],
    ],
)
def test_invalid_arguments_exit_with_usage_error(args, tmp_path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        viewer.main([*args, "--output", str(tmp_path / "x.png")])

    assert excinfo.value.code == 2


def test_palette_options_parse_to_palette() -> None:
    parser = viewer.build_parser()
    opt = parser.parse_args(["--inside-color", "#0a3ba0", "--recolor-inside", "white"])

    options = viewer.resolve_options(opt, parser)

    assert options.palette.inside_color == (10, 59, 160)
    assert options.recolor_palette.inside_color == (255, 255, 255)
    assert options.recolor_palette.outside_color == options.palette.outside_color


def test_batch_rows_default_follows_library() -> None:
    opt = viewer.build_parser().parse_args([])

    assert opt.batch_rows == viewer.DEFAULT_BATCH_ROWS
