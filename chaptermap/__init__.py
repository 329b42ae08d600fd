"""chaptermap — align YouTube transcripts to chapter markers."""
