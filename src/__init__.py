"""Free Read feed engine: passage scoring, segmentation, and feed curation."""
