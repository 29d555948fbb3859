"""Files copied verbatim into the vendor directory of a consuming project."""
