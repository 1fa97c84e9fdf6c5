"""Auxiliary plugins: macros, tables, roll queries, roll references, inline rolls, formatting."""

from dicepy.plugins.formatting import MARKUP_VALUES, FormattingPlugin
from dicepy.plugins.inline_rolls import InlineRollsPlugin
from dicepy.plugins.macros import MacrosPlugin
from dicepy.plugins.roll_queries import RollQueriesPlugin, coerce_number
from dicepy.plugins.roll_references import RollReferencesPlugin
from dicepy.plugins.tables import TablesPlugin, build_weighted_pool

__all__ = [
    "MARKUP_VALUES",
    "FormattingPlugin",
    "InlineRollsPlugin",
    "MacrosPlugin",
    "RollQueriesPlugin",
    "RollReferencesPlugin",
    "TablesPlugin",
    "build_weighted_pool",
    "coerce_number",
]
