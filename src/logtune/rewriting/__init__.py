"""Rewriting subsystem for logtune.

Writes edited per-epoch values back into the original log text, matching
each token's numeric notation and recomputing the footer summaries.
"""

from logtune.rewriting.formatting import format_to_match
from logtune.rewriting.rewriter import LogRewriter, RewriteResult, update_log_content
from logtune.rewriting.summary import FooterStats, select_best, select_target_metric, summarize

__all__ = [
    "FooterStats",
    "LogRewriter",
    "RewriteResult",
    "format_to_match",
    "select_best",
    "select_target_metric",
    "summarize",
    "update_log_content",
]
