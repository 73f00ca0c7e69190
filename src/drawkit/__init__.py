"""Public API for drawkit."""
from .drawing import CycleError, Element, rectangle, root_element, text
from .hoffy import filter_with, flatten, get_even_param, limit_calls, rows_to_objects
from .report import build_chart, demo_chart, load_records, top_actors
from .sfmovies import actor_counts, longest_fun_fact, titles_by_year

__all__ = [
    "CycleError",
    "Element",
    "actor_counts",
    "build_chart",
    "demo_chart",
    "filter_with",
    "flatten",
    "get_even_param",
    "limit_calls",
    "load_records",
    "longest_fun_fact",
    "rectangle",
    "root_element",
    "rows_to_objects",
    "text",
    "titles_by_year",
    "top_actors",
]
