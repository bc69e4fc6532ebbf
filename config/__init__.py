# config package — authoritative source for all scaling policy configuration.
#
# Sub-modules:
#   scaling_params.py  — standard-setting cuts, scale-score anchors,
#                        rounding precision and mode, LOSS/HOSS, report labels
