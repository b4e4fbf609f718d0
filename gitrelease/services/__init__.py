"""Application services for the gitrelease CLI.

Services implement the release workflow, coordinating between the core
layer (core/) and infrastructure (git/, platform/).
"""
