"""
Evaluation results: a total cost decomposed into weighted metric costs.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from layopt.layout.layout import Layout


@dataclass(frozen=True)
class MetricResult:
	"""Cost contributed by a single metric."""
	name: str
	cost: float
	weight: float = 1.0
	message: Optional[str] = None

	@property
	def weighted_cost(self) -> float:
		return self.weight * self.cost


@dataclass(frozen=True)
class EvaluationResult:
	"""
	Total cost of a layout and its per-metric breakdown (lower is better).

	Usage:
		result = evaluator.evaluate_layout(layout)
		result.total_cost
		result.metric("key_cost").cost
		print(result)
	"""
	metric_results: tuple[MetricResult, ...] = ()

	@property
	def total_cost(self) -> float:
		return sum(m.weighted_cost for m in self.metric_results)

	def metric(self, name: str) -> MetricResult:
		for m in self.metric_results:
			if m.name == name:
				return m
		raise KeyError(name)

	def to_dict(self) -> dict[str, Any]:
		return {
			"total_cost": self.total_cost,
			"metrics": [
				{
					"name": m.name,
					"cost": m.cost,
					"weight": m.weight,
					"weighted_cost": m.weighted_cost,
					"message": m.message,
				}
				for m in self.metric_results
			],
		}

	def __str__(self) -> str:
		width = max([len(m.name) for m in self.metric_results] + [10])
		lines = [f"{'metric':<{width}}  {'weighted':>10}  {'raw':>10}  {'weight':>7}"]
		lines.append("-" * len(lines[0]))
		for m in self.metric_results:
			line = f"{m.name:<{width}}  {m.weighted_cost:>10.4f}  {m.cost:>10.4f}  {m.weight:>7.3f}"
			if m.message:
				line += f"  ({m.message})"
			lines.append(line)
		lines.append("-" * len(lines[0]))
		lines.append(f"{'total':<{width}}  {self.total_cost:>10.4f}")
		return "\n".join(lines)


@dataclass(frozen=True)
class LayoutEvaluation:
	"""
	Everything a caller needs to show one evaluated layout.

	Both optimizers report improvements in this shape, so results can be
	rendered the same way regardless of the strategy that produced them.
	"""
	total_cost: float
	details: EvaluationResult
	layout: str
	plot: str
	printed: str = field(default="")

	@classmethod
	def from_result(cls, result: EvaluationResult, layout: Layout) -> 'LayoutEvaluation':
		return cls(
			total_cost=result.total_cost,
			details=result,
			layout=layout.as_text(),
			plot=layout.plot(),
			printed=str(result),
		)

	def to_dict(self) -> dict[str, Any]:
		return {
			"total_cost": self.total_cost,
			"details": self.details.to_dict(),
			"layout": self.layout,
			"plot": self.plot,
			"printed": self.printed,
		}
