#!/usr/bin/env python3
"""
Keyboard layout optimizer CLI (layopt)

Usage:
    layopt evaluate [LAYOUT] [--layout-config FILE] [--unigrams FILE | --corpus FILE]
    layopt plot [LAYOUT] [--layer N] [--fix CHARS]
    layopt genetic [--params FILE] [--fix CHARS] [--start-with-layout] [--seed N]
    layopt anneal [--params FILE] [--fix CHARS] [--start-with-layout] [--seed N]

N-gram input is either frequency files ("<weight> <ngram>" per line, via
--unigrams and optionally --bigrams and --trigrams) or a raw text corpus (--corpus).
"""

from pathlib import Path
from typing import Callable, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

from layopt.core.errors import LayoutOptimizationError
from layopt.evaluation.evaluator import EvaluationParameters, Evaluator
from layopt.evaluation.ngrams import Bigrams, Trigrams, Unigrams
from layopt.evaluation.results import LayoutEvaluation
from layopt.layout.config import LayoutConfig
from layopt.layout.layout import KeyboardLayoutGenerator
from layopt.logger import create_logger
from layopt.optimization.annealing import AnnealingParameters, SimulatedAnnealingOptimizer
from layopt.optimization.genetic import GeneticOptimizer, GeneticParameters
from layopt.optimization.permutation import PermutationLayoutGenerator

app = typer.Typer(
	name="layopt",
	help="Keyboard layout optimizer - evaluate and search layouts",
	no_args_is_help=True,
)

console = Console()


class RichProgressObserver:
	"""Annealing observer that drives a rich progress bar."""

	def __init__(self, progress: Progress):
		self._progress = progress
		self._task = None
		self.best_cost: Optional[float] = None

	def on_start(self, max_iterations: int) -> None:
		self._task = self._progress.add_task("Annealing", total=max_iterations)

	def on_progress(self, iteration: int) -> None:
		if self._task is not None:
			self._progress.update(self._task, completed=iteration)

	def on_new_best(self, layout_text: str, cost: float) -> None:
		self.best_cost = cost
		self._progress.console.print(f"[green]New best[/green] {cost:.4f}  [cyan]{escape(layout_text)}[/cyan]")


def _read_text(path: Path) -> str:
	try:
		return path.read_text(encoding="utf-8")
	except OSError as e:
		rprint(f"[red]Error: cannot read {escape(str(path))}: {escape(str(e))}[/red]")
		raise typer.Exit(1)


def _build(
	layout_config: Optional[Path],
	eval_params: Optional[Path],
	unigrams: Optional[Path],
	bigrams: Optional[Path],
	trigrams: Optional[Path],
	corpus: Optional[Path],
) -> tuple[LayoutConfig, KeyboardLayoutGenerator, Evaluator]:
	"""Layout configuration, layout generator and evaluator from the common options."""
	if corpus is None and unigrams is None:
		rprint("[red]Error: give either --corpus or --unigrams[/red]")
		raise typer.Exit(1)

	config = LayoutConfig.from_yaml(_read_text(layout_config)) if layout_config else LayoutConfig()
	params = EvaluationParameters.from_yaml(_read_text(eval_params)) if eval_params else EvaluationParameters()

	if corpus is not None:
		text = _read_text(corpus)
		unigram_table = Unigrams.from_text(text)
		bigram_table = Bigrams.from_text(text)
		trigram_table = Trigrams.from_text(text)
	else:
		unigram_table = Unigrams.from_frequencies_str(_read_text(unigrams))
		bigram_table = Bigrams.from_frequencies_str(_read_text(bigrams)) if bigrams else None
		trigram_table = Trigrams.from_frequencies_str(_read_text(trigrams)) if trigrams else None

	generator = config.build_generator()
	evaluator = Evaluator.from_parameters(params, unigram_table, bigram_table, trigram_table)
	return config, generator, evaluator


def _make_logger(name: str, verbose: bool, log_dir: Optional[Path]) -> Optional[Callable[[str], None]]:
	if not verbose:
		return None
	return create_logger(name, log_dir=str(log_dir) if log_dir else None, to_file=log_dir is not None)


def _show_evaluation(evaluation: LayoutEvaluation, title: str) -> None:
	table = Table(title=title)
	table.add_column("Metric", style="cyan")
	table.add_column("Cost", justify="right")
	table.add_column("Weight", justify="right")
	table.add_column("Weighted", justify="right")
	table.add_column("Notes", style="dim")
	for metric in evaluation.details.metric_results:
		table.add_row(
			metric.name,
			f"{metric.cost:.4f}",
			f"{metric.weight:g}",
			f"{metric.weighted_cost:.4f}",
			metric.message or "",
		)
	table.add_row("[bold]total[/bold]", "", "", f"[bold]{evaluation.total_cost:.4f}[/bold]", "")

	console.print(evaluation.plot, markup=False)
	console.print(table)


# Shared option declarations
LayoutConfigOption = typer.Option(None, "--layout-config", "-l", help="Layout config YAML")
EvalParamsOption = typer.Option(None, "--eval-params", "-e", help="Evaluation parameters YAML")
UnigramsOption = typer.Option(None, "--unigrams", "-u", help="Unigram frequency file")
BigramsOption = typer.Option(None, "--bigrams", "-b", help="Bigram frequency file")
TrigramsOption = typer.Option(None, "--trigrams", "-t", help="Trigram frequency file")
CorpusOption = typer.Option(None, "--corpus", "-c", help="Raw text corpus (replaces --unigrams/--bigrams/--trigrams)")
ParamsOption = typer.Option(None, "--params", "-p", help="Optimizer parameters YAML")
FixOption = typer.Option("", "--fix", "-f", help="Characters that keep their key")
StartOption = typer.Option(False, "--start-with-layout", help="Start from the base layout instead of a random one")
SeedOption = typer.Option(None, "--seed", "-s", help="Random seed")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Log optimizer progress")
LogDirOption = typer.Option(None, "--log-dir", help="Also write the log to this directory")


@app.command("evaluate")
def evaluate(
	layout: Optional[str] = typer.Argument(None, help="Layout text (default: the configured base layout)"),
	layout_config: Optional[Path] = LayoutConfigOption,
	eval_params: Optional[Path] = EvalParamsOption,
	unigrams: Optional[Path] = UnigramsOption,
	bigrams: Optional[Path] = BigramsOption,
	trigrams: Optional[Path] = TrigramsOption,
	corpus: Optional[Path] = CorpusOption,
):
	"""Evaluate a single layout."""
	try:
		config, generator, evaluator = _build(layout_config, eval_params, unigrams, bigrams, trigrams, corpus)
		materialized = generator.generate(layout if layout is not None else config.base_layout)
		result = evaluator.evaluate_layout(materialized)
	except LayoutOptimizationError as e:
		rprint(f"[red]Error: {escape(str(e))}[/red]")
		raise typer.Exit(1)

	_show_evaluation(LayoutEvaluation.from_result(result, materialized), "Evaluation")


@app.command("plot")
def plot(
	layout: Optional[str] = typer.Argument(None, help="Layout text (default: the configured base layout)"),
	layer: int = typer.Option(0, "--layer", help="Layer to draw (0 = base, 1 = shifted)"),
	fix: str = FixOption,
	layout_config: Optional[Path] = LayoutConfigOption,
):
	"""Draw one layer of a layout and list the keys an optimizer may permute."""
	try:
		config = LayoutConfig.from_yaml(_read_text(layout_config)) if layout_config else LayoutConfig()
		generator = config.build_generator()
		text = layout if layout is not None else config.base_layout
		materialized = generator.generate(text)
		picture = materialized.plot_layer(layer)
		permutable = PermutationLayoutGenerator(text, fix, generator).slot_characters
	except (LayoutOptimizationError, ValueError) as e:
		rprint(f"[red]Error: {escape(str(e))}[/red]")
		raise typer.Exit(1)

	console.print(picture, markup=False)
	rprint(f"[cyan]Permutable keys ({len(permutable)}):[/cyan] {escape(''.join(permutable))}")


@app.command("genetic")
def genetic(
	layout_config: Optional[Path] = LayoutConfigOption,
	eval_params: Optional[Path] = EvalParamsOption,
	unigrams: Optional[Path] = UnigramsOption,
	bigrams: Optional[Path] = BigramsOption,
	trigrams: Optional[Path] = TrigramsOption,
	corpus: Optional[Path] = CorpusOption,
	params: Optional[Path] = ParamsOption,
	generations: Optional[int] = typer.Option(None, "--generations", "-g", help="Override generation_limit"),
	fix: str = FixOption,
	start_with_layout: bool = StartOption,
	seed: Optional[int] = SeedOption,
	verbose: bool = VerboseOption,
	log_dir: Optional[Path] = LogDirOption,
):
	"""Run the genetic optimizer generation by generation."""
	try:
		config, generator, evaluator = _build(layout_config, eval_params, unigrams, bigrams, trigrams, corpus)
		parameters = GeneticParameters.from_yaml(_read_text(params)) if params else GeneticParameters()
		if generations is not None:
			parameters.generation_limit = generations
		optimizer = GeneticOptimizer(
			parameters,
			evaluator,
			config.base_layout,
			generator,
			fixed_characters=fix,
			start_with_layout=start_with_layout,
			seed=seed,
			verbose=verbose,
			logger=_make_logger("genetic", verbose, log_dir),
		)
	except LayoutOptimizationError as e:
		rprint(f"[red]Error: {escape(str(e))}[/red]")
		raise typer.Exit(1)

	last_best = None
	while True:
		outcome = optimizer.step()
		if outcome.best is not None and outcome.best.fitness != last_best:
			last_best = outcome.best.fitness
			rprint(
				f"[dim]Gen {outcome.generation}[/dim] best cost "
				f"[green]{outcome.best.evaluation.total_cost:.4f}[/green]  [cyan]{escape(outcome.best.evaluation.layout)}[/cyan]"
			)
		if not outcome.is_intermediate:
			break

	if outcome.best is not None:
		_show_evaluation(outcome.best.evaluation, f"Best after {outcome.generation} generations")
	if outcome.is_failed:
		rprint(f"[red]Optimization failed: {escape(outcome.reason)}[/red]")
		raise typer.Exit(1)
	rprint(f"[green]Done[/green] ({outcome.stop_reason.name.lower()})")


@app.command("anneal")
def anneal(
	layout_config: Optional[Path] = LayoutConfigOption,
	eval_params: Optional[Path] = EvalParamsOption,
	unigrams: Optional[Path] = UnigramsOption,
	bigrams: Optional[Path] = BigramsOption,
	trigrams: Optional[Path] = TrigramsOption,
	corpus: Optional[Path] = CorpusOption,
	params: Optional[Path] = ParamsOption,
	iterations: Optional[int] = typer.Option(None, "--iterations", "-n", help="Override max_iterations"),
	fix: str = FixOption,
	start_with_layout: bool = StartOption,
	seed: Optional[int] = SeedOption,
	verbose: bool = VerboseOption,
	log_dir: Optional[Path] = LogDirOption,
):
	"""Run simulated annealing to completion."""
	progress = Progress(
		TextColumn("[progress.description]{task.description}"),
		BarColumn(),
		MofNCompleteColumn(),
		TimeElapsedColumn(),
		console=console,
	)
	observer = RichProgressObserver(progress)
	try:
		config, generator, evaluator = _build(layout_config, eval_params, unigrams, bigrams, trigrams, corpus)
		parameters = AnnealingParameters.from_yaml(_read_text(params)) if params else AnnealingParameters()
		if iterations is not None:
			parameters.max_iterations = iterations
		optimizer = SimulatedAnnealingOptimizer(
			parameters,
			evaluator,
			config.base_layout,
			generator,
			fixed_characters=fix,
			start_with_layout=start_with_layout,
			observer=observer,
			seed=seed,
			verbose=verbose,
			logger=_make_logger("anneal", verbose, log_dir),
		)
		with progress:
			result = optimizer.run()
	except LayoutOptimizationError as e:
		rprint(f"[red]Error: {escape(str(e))}[/red]")
		raise typer.Exit(1)

	_show_evaluation(result.best_evaluation, f"Best after {result.iterations_run} iterations")
	rprint(
		f"[green]Done[/green] ({result.stop_reason.name.lower()}): "
		f"{result.improvement_percent:.2f}% better than the start, {result.accepted} moves accepted"
	)


def main():
	"""Entry point for the CLI."""
	app()


if __name__ == "__main__":
	main()
