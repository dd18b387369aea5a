"""Bundled data files for treeverify."""
