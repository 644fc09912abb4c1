import logging

import numpy as np
import pytest
from PIL import Image as PILImage

from meanfilter.cli.filter_image import main
from meanfilter.pipeline.mean_filter import apply_mean_filter
from meanfilter.services.filter_worker_pool import FilterWorkerPool


def test_apply_mean_filter_writes_jpeg(tmp_path, png_file):
    out = tmp_path / "filtered.jpg"

    written = apply_mean_filter(png_file, 4, kernel_size=3, output_path=out)

    assert written == out
    with PILImage.open(out) as result:
        assert result.format == "JPEG"
        assert result.size == (53, 37)


def test_apply_mean_filter_smooths_noise(tmp_path, png_file, random_pixels):
    out = tmp_path / "filtered.png.jpg"
    apply_mean_filter(png_file, 3, kernel_size=7, output_path=out, quality=95)

    with PILImage.open(out) as result:
        filtered = np.asarray(result.convert("RGB"), dtype=np.float64)
    assert filtered.std() < random_pixels.astype(np.float64).std() / 2


def test_cli_success(tmp_path, png_file, capsys):
    out = tmp_path / "cli.jpg"

    code = main([str(png_file), "2", "--kernel-size", "5", "--output", str(out)])

    assert code == 0
    assert out.exists()
    assert str(out) in capsys.readouterr().out


def test_cli_tiles_strategy(tmp_path, png_file):
    out = tmp_path / "tiles.jpg"

    assert main([str(png_file), "6", "--strategy", "tiles", "-o", str(out)]) == 0
    assert out.exists()


@pytest.mark.parametrize("argv", [[], ["only-input.png"], ["in.png", "many"]])
def test_cli_usage_errors_exit_non_zero(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2


def test_cli_rejects_even_kernel_without_writing(tmp_path, png_file, caplog):
    out = tmp_path / "even.jpg"

    with caplog.at_level(logging.ERROR):
        code = main([str(png_file), "2", "-k", "4", "-o", str(out)])

    assert code == 1
    assert not out.exists()
    assert "configuration stage failed" in caplog.text


def test_cli_reports_decode_failure(tmp_path, caplog):
    out = tmp_path / "never.jpg"

    with caplog.at_level(logging.ERROR):
        code = main([str(tmp_path / "missing.png"), "2", "-o", str(out)])

    assert code == 1
    assert not out.exists()
    assert "decode stage failed" in caplog.text


def test_cli_reports_encode_failure(tmp_path, png_file, caplog):
    out = tmp_path / "no-such-dir" / "out.jpg"

    with caplog.at_level(logging.ERROR):
        code = main([str(png_file), "2", "-o", str(out)])

    assert code == 1
    assert "encode stage failed" in caplog.text


def test_cli_worker_fault_writes_nothing(tmp_path, png_file, caplog, monkeypatch):
    def explode(self, source, destination, region, kernel):
        raise RuntimeError("simulated")

    monkeypatch.setattr(FilterWorkerPool, "_work", explode)
    out = tmp_path / "fault.jpg"

    with caplog.at_level(logging.ERROR):
        code = main([str(png_file), "3", "-o", str(out)])

    assert code == 1
    assert not out.exists()
    assert "processing stage failed" in caplog.text


def test_cli_zero_workers_is_clamped(tmp_path, png_file):
    out = tmp_path / "clamped.jpg"

    assert main([str(png_file), "0", "-o", str(out)]) == 0
    assert out.exists()


@pytest.mark.parametrize("name, value", [
    ("MEANFILTER_MAX_THREADS", "many"),
    ("MEANFILTER_KERNEL_SIZE", "seven"),
    ("JPEG_QUALITY", "high"),
    ("MEANFILTER_READ_TIMEOUT", "soon"),
])
def test_cli_malformed_env_reports_configuration_stage(tmp_path, png_file, caplog,
                                                       monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    out = tmp_path / "env.jpg"

    with caplog.at_level(logging.ERROR):
        code = main([str(png_file), "2", "-o", str(out)])

    assert code == 1
    assert not out.exists()
    assert "configuration stage failed" in caplog.text
    assert name in caplog.text


def test_cli_defaults_come_from_environment(tmp_path, png_file, monkeypatch):
    out = tmp_path / "from-env.jpg"
    monkeypatch.setenv("MEANFILTER_OUTPUT_PATH", str(out))
    monkeypatch.setenv("MEANFILTER_KERNEL_SIZE", "3")

    assert main([str(png_file), "2"]) == 0
    assert out.exists()
