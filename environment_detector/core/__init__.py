"""Detection core: timed cache, detector contract and registry"""
