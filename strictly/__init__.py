"""Score extraction for Strictly Come Dancing series articles.

This package turns the marked-up article for one series into an ordered
list of performance records (who danced what, with whom, and the score).

The extraction engine lives in ``strictly.extract``; fetching articles,
writing records and reconciling them against a reference dataset are
thin collaborators around it.
"""

__version__ = "0.3.0"
