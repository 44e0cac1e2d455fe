#!/usr/bin/python3
"""
Re-submits the registered Zeyphr contracts for explorer verification.

ape run verify --network-name iota
"""

from zeyphr_deployment.cli import verify as cli

if __name__ == "__main__":
    cli()
