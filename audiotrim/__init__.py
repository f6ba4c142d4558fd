"""audiotrim: silence detection and trim-point suggestion for decoded audio."""
