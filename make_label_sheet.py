#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Print label text onto Avery-style label sheets as PDF.
"""

# local repo modules
import label_sheet_generator.cli


if __name__ == "__main__":
	label_sheet_generator.cli.main()
