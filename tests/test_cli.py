import pytest
import SimpleITK as sitk
from click.testing import CliRunner

from augtools.cli.__main__ import cli


@pytest.fixture
def runner():
    return CliRunner()


def test_help(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("domain", "spatial", "intensity"):
        assert command in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "augtools" in result.output


def test_domain(runner, image_file, second_image_file):
    result = runner.invoke(
        cli, ["domain", str(image_file), str(second_image_file), "--size", "128"]
    )
    assert result.exit_code == 0, result.output
    assert "128" in result.output
    assert "0.7795" in result.output
    assert "0.9370" in result.output
    assert "119.0000" in result.output


def test_domain_conflicting_options(runner, image_file):
    result = runner.invoke(
        cli,
        ["domain", str(image_file), "-s", "64", "--isotropic-axis", "0", "--isotropic-size", "64"],
    )
    assert result.exit_code == 2
    assert "cannot be combined" in result.output


def test_domain_incomplete_isotropic_options(runner, image_file):
    result = runner.invoke(cli, ["domain", str(image_file), "--isotropic-axis", "0"])
    assert result.exit_code == 2
    assert "Invalid settings" in result.output
    assert "set together" in result.output


def test_spatial_dry_run(runner, image_file, second_image_file):
    result = runner.invoke(
        cli,
        [
            "spatial",
            str(image_file),
            str(second_image_file),
            "-r", "angle", "-0.1,0,0.1",
            "-r", "scale", "0.9:1.1:3",
            "--dry-run",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "9 samples per image, 18 in total" in result.output


def test_spatial_writes_images(runner, tmp_path, image_file):
    out = tmp_path / "out"
    result = runner.invoke(
        cli,
        [
            "spatial",
            str(image_file),
            "-o", str(out),
            "--family", "reflection",
            "-r", "flip_x", "0,1",
            "-s", "32",
        ],
    )
    assert result.exit_code == 0, result.output
    written = sorted(out.iterdir())
    assert [p.name for p in written] == ["ct_spatial_000.mha", "ct_spatial_001.mha"]
    assert sitk.ReadImage(str(written[0])).GetSize() == (32, 32)


def test_spatial_existing_outputs_abort(runner, tmp_path, image_file):
    args = [
        "spatial",
        str(image_file),
        "-o", str(tmp_path / "out"),
        "-r", "angle", "0,0.1",
        "-s", "16",
    ]
    assert runner.invoke(cli, args).exit_code == 0
    result = runner.invoke(cli, args)
    assert result.exit_code == 1
    assert not isinstance(result.exception, FileExistsError)


def test_spatial_random(runner, image_file):
    result = runner.invoke(
        cli,
        ["spatial", str(image_file), "-r", "angle", "-0.2,0.2", "--random", "7", "-n"],
    )
    assert result.exit_code == 0, result.output
    assert "7 samples per image" in result.output


def test_spatial_sample_limit(runner, tmp_path, image_file):
    result = runner.invoke(
        cli,
        [
            "spatial",
            str(image_file),
            "-o", str(tmp_path / "out"),
            "-r", "angle", "-0.1:0.1:5",
            "--max-samples", "2",
        ],
    )
    assert result.exit_code == 1
    assert not list((tmp_path / "out").glob("*.mha"))


@pytest.mark.parametrize(
    "args",
    [
        ["-r", "shear", "0,1"],
        ["-r", "angle", "a,b"],
        ["-r", "angle", "0:1"],
    ],
)
def test_spatial_bad_ranges(runner, image_file, args):
    result = runner.invoke(cli, ["spatial", str(image_file), *args, "-n"])
    assert result.exit_code == 2


def test_intensity(runner, tmp_path, image_file):
    out = tmp_path / "out"
    result = runner.invoke(
        cli,
        [
            "intensity",
            str(image_file),
            "-o", str(out),
            "-f", "smoothing_recursive_gaussian:sigma=1.5",
            "-f", "shot_noise",
        ],
    )
    assert result.exit_code == 0, result.output
    assert (out / "ct_smoothing_recursive_gaussian_000.mha").exists()
    assert (out / "ct_shot_noise_001.mha").exists()


def test_intensity_list_filters(runner, image_file):
    result = runner.invoke(cli, ["intensity", str(image_file), "--list-filters"])
    assert result.exit_code == 0
    assert "speckle_noise" in result.output


@pytest.mark.parametrize("spec", ["sharpen", "shot_noise:sigma=1", "shot_noise:scale"])
def test_intensity_bad_filter(runner, image_file, spec):
    result = runner.invoke(cli, ["intensity", str(image_file), "-f", spec])
    assert result.exit_code == 2
