#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tile images or PDF first pages onto print-ready A4 N-up sheets.
"""

import nup_sheet.cli


if __name__ == "__main__":
	nup_sheet.cli.main()
