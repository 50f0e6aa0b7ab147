"""Tests for the file/console Logger."""

from layopt.logger import Logger, create_logger


def test_writes_log_file(tmp_path):
	logger = Logger(name="run", log_dir=str(tmp_path), console=False)
	logger("first line")
	logger.header("Genetic")
	logger.close()

	content = (tmp_path / logger.log_file.split("/")[-1]).read_text()
	assert "first line" in content
	assert "  Genetic" in content
	assert "=" * 70 in content


def test_console_only(capsys):
	logger = create_logger("console", to_file=False)
	logger("hello")
	logger.close()
	assert logger.log_file is None
	assert "hello" in capsys.readouterr().err


def test_usable_as_optimizer_logger(tmp_path):
	logger = Logger(name="callable", log_dir=str(tmp_path), console=False)
	log_fn = logger
	log_fn("[GA] [Gen 1/5] best=-1.0000")
	logger.close()
	assert logger.log_file.startswith(str(tmp_path))
