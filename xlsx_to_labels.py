#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Convert an order spreadsheet into a printable 90 x 50 mm label PDF.
"""

import sys

import order_label_generator.cli


if __name__ == "__main__":
	sys.exit(order_label_generator.cli.main())
