import os
import numpy as np
import pytest
from PIL import Image
from HF.cli import build_parser, is_numeric, main
from HF.config import MISSING_VALUE


@pytest.fixture
def image_png(tmp_path):
    rng = np.random.default_rng(4)
    image = (rng.random((20, 24)) * 255).astype(np.uint8)
    path = tmp_path / "image.png"
    Image.fromarray(image).save(path)
    return str(path)


@pytest.mark.parametrize("arg", ["2", "0.01", "10.", ".5", "003"])
def test_numeric(arg):
    assert is_numeric(arg)


@pytest.mark.parametrize("arg", ["", ".", "1.2.3", "-1", "1e-3", "abc", "+2", "٣"])
def test_not_numeric(arg):
    assert not is_numeric(arg)


def test_parse_arguments():
    args = build_parser().parse_args(["image.png", "0.01", "2", "4"])
    assert args.image_path == "image.png"
    assert args.epsilon == 0.01
    assert args.z == 2.0
    assert args.connectivity == 4
    assert args.method == "boundary"


@pytest.mark.parametrize("argv, message", [
    (["image.png", "abc", "2", "4"], "epsilon should be float"),
    (["image.png", "0.01", "1.2.3", "4"], "z should be float"),
    (["image.png", "0.01", "2", "6"], "pixel connectivity value should be 4 or 8"),
    (["image.png", "0", "2", "8"], "epsilon should be a positive float"),
    (["image.png", "0.01", "2"], "usage"),
])
def test_invalid_arguments(argv, message, capsys, tmp_path):
    with pytest.raises(SystemExit) as info:
        main(argv + ["--save-dir", str(tmp_path / "out")])
    assert info.value.code != 0
    assert message in capsys.readouterr().err
    assert not os.path.exists(tmp_path / "out")


@pytest.mark.parametrize("hole, method", [
    ("square", "boundary"),
    ("random", "boundary"),
    ("square", "neighbours"),
])
def test_fill_image(image_png, tmp_path, hole, method):
    save_dir = str(tmp_path / "out")
    code = main([image_png, "0.01", "2", "8", "--hole", hole, "--hole-size", "5",
                 "--seed", "0", "--method", method, "--save-dir", save_dir])
    assert code == 0
    for name in ("image_holed.png", "hole.png", "image_filled.png", "image_filled.npy", "log.txt"):
        assert os.path.exists(os.path.join(save_dir, name))

    filled = np.load(os.path.join(save_dir, "image_filled.npy"))
    assert filled.shape == (20, 24)
    assert not np.any(filled == MISSING_VALUE)
    assert filled.min() >= -1e-9 and filled.max() <= 1.0 + 1e-9


def test_fill_image_with_torch(image_png, tmp_path):
    save_dir = str(tmp_path / "out")
    assert main([image_png, "0.01", "2", "4", "--hole", "square", "--hole-size", "4",
                 "--device", "cpu", "--save-dir", save_dir]) == 0
    filled = np.load(os.path.join(save_dir, "image_filled.npy"))
    assert not np.any(filled == MISSING_VALUE)


def test_fill_image_with_mask(image_png, tmp_path):
    mask = np.zeros((20, 24), dtype=np.uint8)
    mask[5:9, 10:15] = 255
    mask_path = str(tmp_path / "mask.png")
    Image.fromarray(mask).save(mask_path)

    save_dir = str(tmp_path / "out")
    assert main([image_png, "0.5", "3", "4", "--mask", mask_path, "--save-dir", save_dir]) == 0
    filled = np.load(os.path.join(save_dir, "image_filled.npy"))
    original = np.array(Image.open(image_png), dtype=np.float64) / 255.0
    np.testing.assert_allclose(filled[mask == 0], original[mask == 0], atol=1e-6)


def test_image_without_hole(image_png, tmp_path, capsys):
    assert main([image_png, "0.01", "2", "4", "--save-dir", str(tmp_path / "out")]) == 1
    assert "No missing pixel in the image." in capsys.readouterr().err


def test_missing_image(tmp_path, capsys):
    assert main([str(tmp_path / "nothing.png"), "0.01", "2", "4",
                 "--save-dir", str(tmp_path / "out")]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_huge_z(image_png, tmp_path, capsys):
    save_dir = str(tmp_path / "out")
    # 4-connected BFS order always has an already known side neighbour
    assert main([image_png, "0.01", "3000", "4", "--hole", "square", "--hole-size", "5",
                 "--method", "neighbours", "--save-dir", save_dir]) == 0
    assert not np.any(np.load(os.path.join(save_dir, "image_filled.npy")) == MISSING_VALUE)

    # the center of the square is too far from the boundary for any weight to survive
    assert main([image_png, "0.01", "3000", "8", "--hole", "square", "--hole-size", "5",
                 "--save-dir", save_dir]) == 1
    assert "Degenerate weights" in capsys.readouterr().err


@pytest.mark.parametrize("options, message", [
    (["--device", "cpu", "--on-degenerate", "skip"], "only supports on_degenerate='raise'"),
    (["--device", "cpu", "--method", "neighbours"], "only runs the boundary method"),
    (["--method", "boundary", "--on-degenerate", "boundary"], "only applies to the neighbours method"),
])
def test_unsupported_option_combinations(image_png, tmp_path, capsys, options, message):
    save_dir = tmp_path / "out"
    with pytest.raises(SystemExit) as info:
        main([image_png, "0.01", "2", "4", "--hole", "square", "--save-dir", str(save_dir)] + options)
    assert info.value.code == 2
    assert message in capsys.readouterr().err
    assert not os.path.exists(save_dir)


def test_skip_policy_on_fully_masked_image(image_png, tmp_path):
    mask_path = str(tmp_path / "mask.png")
    Image.fromarray(np.full((20, 24), 255, dtype=np.uint8)).save(mask_path)
    save_dir = str(tmp_path / "out")
    assert main([image_png, "0.01", "2", "4", "--mask", mask_path,
                 "--on-degenerate", "skip", "--save-dir", save_dir]) == 0
    assert np.all(np.load(os.path.join(save_dir, "image_filled.npy")) == MISSING_VALUE)


def test_file_that_is_not_an_image(tmp_path, capsys):
    path = tmp_path / "image.png"
    path.write_text("not an image")
    assert main([str(path), "0.01", "2", "4", "--save-dir", str(tmp_path / "out")]) == 1
    assert "Error: " in capsys.readouterr().err
