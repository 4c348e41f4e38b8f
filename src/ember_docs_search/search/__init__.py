"""
Corpus analysis and ranking package.

This package provides the pure-Python query stack:
- segmenter: Corpus sections, items and derived titles
- entities: API record indexing by name, module and last segment
- deprecations: Deprecation classifier and two-tier registry
- morphology: Singular/plural normalization
- ranker: Free-text relevance scoring
- snippet: Excerpt extraction around term clusters
- best_practices: Topic-scoped best-practice retrieval
"""
