#!/usr/bin/python3
"""
Deploys ZeyphrAdmin and ZeyphrMarketplace.

ape run deploy --network-name hardhat
ape run deploy --network-name iota --account-alias ZEYPHR_DEPLOYER
"""

from zeyphr_deployment.cli import deploy as cli

if __name__ == "__main__":
    cli()
