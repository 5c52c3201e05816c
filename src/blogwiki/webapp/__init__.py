"""HTTP surface for blogwiki."""
