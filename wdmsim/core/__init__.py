"""
Simulation of signal propagation in the WDM network

Optical signals, as described via :class:`.info.SignalState`, travel through the fibers and the
amplifiers defined in :py:mod:`.elements` and cross the nodes of the :py:mod:`.network` according to their
:py:mod:`.oadm` architecture.
The simulation is controlled via :py:mod:`.parameters` and implemented mainly
via :py:mod:`.propagation` and :py:mod:`.utils`.
"""
