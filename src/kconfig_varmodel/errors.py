# Copyright (C) 2025 Eric Ketzler, Elias Kuiter
# errors raised while reading kconfigreader output
# I/O problems are left to surface as OSError; FormatError covers everything structural


class FormatError(ValueError):
    """The .dimacs or .rsf file (or the combination of both) is not what kconfigreader writes."""
