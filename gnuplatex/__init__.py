"""
gnuplatex - gnuplot cairolatex build provider

Runs gnuplot scripts that render through the cairolatex terminal and turns
their output into a compiled PDF and one PNG per plot.

Architecture:
- Build Context: eligibility, dependency checks, gnuplot invocation
- Rendering Context: wrapper assembly, PDF compilation, rasterization, cleanup
"""

__version__ = "0.1.0"
