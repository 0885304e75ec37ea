"""Service layer: the post listing pipeline and write-side helpers."""
