"""
Rank and bucket aggregation of record collections.
"""

# Standard Library
import dataclasses
import typing

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.config


OTHERS_LABEL = hrep.config.OTHERS_LABEL
UNKNOWN_LABEL = hrep.config.UNKNOWN_LABEL


@dataclasses.dataclass(frozen=True)
class SeriesEntry:
	name: str
	count: int


#============================================
def count_by(
	records: typing.Iterable[typing.Any],
	key_fn: typing.Callable[[typing.Any], str | None],
	missing_label: str | None = UNKNOWN_LABEL,
) -> list[SeriesEntry]:
	"""
	Group records by a derived key and rank the counts.

	The result is sorted by count descending. Equal counts keep the order in
	which their key was first seen.

	Args:
		records: Records to group.
		key_fn: Function deriving the grouping key from a record.
		missing_label: Label for empty or missing keys. None drops those records.

	Returns:
		Ranked series.
	"""
	counts: dict[str, int] = {}
	for record in records:
		key = key_fn(record)
		if key is not None:
			key = str(key).strip()
		if not key:
			if missing_label is None:
				continue
			key = missing_label
		counts[key] = counts.get(key, 0) + 1
	# sorted() is stable, dict order is first-seen order
	ranked = sorted(counts.items(), key=lambda item: -item[1])
	return [SeriesEntry(name=name, count=count) for name, count in ranked]


#============================================
def rank_series(entries: typing.Iterable[tuple[str, int]]) -> list[SeriesEntry]:
	"""
	Rank already-counted (name, count) pairs.

	Args:
		entries: Pairs in source order.

	Returns:
		Ranked series.
	"""
	pairs = [(str(name), max(0, int(count))) for name, count in entries]
	ranked = sorted(pairs, key=lambda item: -item[1])
	return [SeriesEntry(name=name, count=count) for name, count in ranked]


#============================================
def top_n_plus_others(
	series: list[SeriesEntry],
	top_n: int,
	others_label: str = OTHERS_LABEL,
) -> list[SeriesEntry]:
	"""
	Keep the first N entries and fold the remainder into one Others entry.

	Args:
		series: Ranked series.
		top_n: Number of entries to keep. Values <= 0 fold everything.
		others_label: Name of the folded entry.

	Returns:
		Bucketed series with at most top_n + 1 entries.
	"""
	keep = max(0, top_n)
	head = list(series[:keep])
	remainder = series[keep:]
	if remainder:
		head.append(SeriesEntry(name=others_label, count=sum(entry.count for entry in remainder)))
	return head


#============================================
def genus_of(scientific_name: str | None) -> str | None:
	"""
	First whitespace-delimited token of a scientific name.
	"""
	parts = (scientific_name or "").split()
	if not parts:
		return None
	return parts[0]


#============================================
def epithet_of(scientific_name: str | None) -> str | None:
	"""
	Second whitespace-delimited token of a scientific name, lower-cased.
	"""
	parts = (scientific_name or "").split()
	if len(parts) < 2:
		return None
	return parts[1].lower()


#============================================
def distinct_count(values: typing.Iterable[typing.Any]) -> int:
	"""
	Count distinct values, treating None as a value of its own.

	Args:
		values: Values to count.

	Returns:
		Number of distinct values.
	"""
	return len(set(values))


#============================================
def series_total(series: list[SeriesEntry]) -> int:
	"""
	Sum of counts across a series.
	"""
	return sum(entry.count for entry in series)
