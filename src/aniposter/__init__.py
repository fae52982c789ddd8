"""AniPoster - display image resolution for anime recommendations.

Resolves each recommended title to a verified poster image through the
Jikan (MyAnimeList) search API, in paced concurrent batches, with a
persisted 24-hour title -> image cache.
"""

__version__ = "0.1.0"
