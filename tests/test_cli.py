import json
import pathlib

import pypdf
import pytest

import helpers
import nup_sheet as nups
import nup_sheet.cli


#============================================
def _write_inputs(directory: pathlib.Path, count: int) -> pathlib.Path:
	directory.mkdir()
	for index in range(count):
		helpers.write_two_tone_image(directory, f"card_{index:02d}.png", (120 + index, 200), "red", "navy")
	return directory


#============================================
def test_parse_args_defaults() -> None:
	args = nups.cli.parse_args(["a.png", "-o", "out.pdf"])
	config = nups.cli.build_config(args)
	assert config.mode == 9
	assert config.show_guides is True
	assert config.margin == 4.3
	assert config.spacing == 4.3
	assert config.manifest_path == "out.pdf.json"
	args = nups.cli.parse_args(["a.png", "-o", "out.pdf", "-m", "4", "-G", "--manifest", "m.json"])
	config = nups.cli.build_config(args)
	assert config.mode == 4
	assert config.show_guides is False
	assert config.manifest_path == "m.json"


#============================================
def test_run_pipeline_end_to_end(tmp_path: pathlib.Path) -> None:
	"""
	A directory of images becomes a PDF, a preview and a manifest.
	"""
	inputs = _write_inputs(tmp_path / "cards", 7)
	output_pdf = tmp_path / "sheet.pdf"
	preview = tmp_path / "sheet.html"
	args = nups.cli.parse_args([
		str(inputs),
		"-o", str(output_pdf),
		"-p", str(preview),
		"-m", "6",
	])
	status = nups.cli.run_pipeline(args)
	assert status == 0
	assert len(pypdf.PdfReader(str(output_pdf)).pages) == 2
	assert preview.read_text(encoding="utf-8").count('class="page portrait"') == 2

	manifest = json.loads(pathlib.Path(f"{output_pdf}.json").read_text(encoding="utf-8"))
	assert manifest["pages"] == 2
	assert manifest["placed_items"] == 7
	assert manifest["grid"]["policy"] == "COVER_TOP_CROP"
	assert [asset["source"] for asset in manifest["assets"]][:2] == ["card_00.png", "card_01.png"]
	assert manifest["skipped_duplicates"] == []


#============================================
def test_run_pipeline_degenerate_layout(tmp_path: pathlib.Path, capsys) -> None:
	inputs = _write_inputs(tmp_path / "cards", 1)
	args = nups.cli.parse_args([str(inputs), "-o", str(tmp_path / "out.pdf"), "--margin", "110"])
	assert nups.cli.run_pipeline(args) == 2
	assert "Layout error" in capsys.readouterr().out
	assert not (tmp_path / "out.pdf").exists()


#============================================
def test_run_pipeline_without_images(tmp_path: pathlib.Path) -> None:
	empty = tmp_path / "empty"
	empty.mkdir()
	args = nups.cli.parse_args([str(empty), "-o", str(tmp_path / "out.pdf")])
	assert nups.cli.run_pipeline(args) == 1


#============================================
def test_negative_lengths_rejected_by_parser(capsys) -> None:
	"""
	Negative or non-numeric margin and spacing stop at argument parsing.
	"""
	for option, value in (("--margin", "-1"), ("--spacing", "-0.5"), ("--margin", "nan"), ("--spacing", "wide")):
		with pytest.raises(SystemExit) as excinfo:
			nups.cli.parse_args(["a.png", "-o", "out.pdf", option, value])
		assert excinfo.value.code == 2
	assert "non-negative" in capsys.readouterr().err


#============================================
def test_run_pipeline_negative_margin_namespace(tmp_path: pathlib.Path) -> None:
	"""
	A namespace built without the parser still gets a layout error status.
	"""
	inputs = _write_inputs(tmp_path / "cards", 1)
	args = nups.cli.parse_args([str(inputs), "-o", str(tmp_path / "out.pdf")])
	args.margin = -1.0
	assert nups.cli.run_pipeline(args) == 2
	assert not (tmp_path / "out.pdf").exists()
