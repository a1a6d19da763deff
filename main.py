#!/usr/bin/env python3
"""
Main script for running a simple linear regression analysis.
"""

# Pipeline overview (README-style):
# 1) Load a built-in dataset (mtcars, faithful) or an uploaded CSV and type
#    each column as numeric or categorical.
# 2) Fit response ~ predictor by OLS on the complete rows.
# 3) Classify residual bias/spread, R-squared and test significance into
#    narrative labels.
# 4) Export regression_summary.txt plus scatter, QQ and correlation figures.
#
# Example:
#     python main.py --dataset mtcars --x wt --y mpg --predict 3.0

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from olsview.cli import main

if __name__ == "__main__":
    sys.exit(main())
