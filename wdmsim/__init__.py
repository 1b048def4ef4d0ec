"""
wdmsim is a physical layer performance simulator for WDM optical networks. It computes the power, the
chromatic dispersion, the PMD and the OSNR of every lightpath routed over a network of amplified fibers.

Signal propagation is implemented in :py:mod:`.core`.
Various tools and auxiliary code, including the JSON I/O handling and the command line, is in
:py:mod:`.tools`.
"""
