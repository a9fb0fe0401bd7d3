#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Build herbarium PDF reports and label sheets from JSON records.
"""

import herbarium_reports.cli


if __name__ == "__main__":
	herbarium_reports.cli.main()
