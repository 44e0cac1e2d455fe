#!/usr/bin/env python3

import os

from ape_accounts import import_account_from_private_key

from zeyphr_deployment.utils import load_environment

ACCOUNT_ALIAS = "ZEYPHR_DEPLOYER"


def main():
    load_environment()
    try:
        passphrase = os.environ["DEPLOYER_PASSPHRASE"]
        private_key = os.environ["PRIVATE_KEY"]
    except KeyError:
        raise Exception(
            "There are missing environment variables. "
            "Please set DEPLOYER_PASSPHRASE and PRIVATE_KEY."
        )
    account = import_account_from_private_key(ACCOUNT_ALIAS, passphrase, private_key)
    print(f"Account imported: {account.address}")


if __name__ == "__main__":
    main()
