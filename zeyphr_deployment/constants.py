from pathlib import Path

import zeyphr_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(zeyphr_deployment.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
NETWORKS_CONFIG_FILEPATH = DEPLOYMENT_DIR / "networks.yml"
ARTIFACTS_DIR = PROJECT_ROOT / "deployment" / "artifacts"
DOTENV_FILEPATH = PROJECT_ROOT / ".env"

#
# Networks
#

HARDHAT = "hardhat"
LOCALHOST = "localhost"

DEFAULT_DEVELOPMENT_NETWORKS = [HARDHAT, LOCALHOST]
DEFAULT_APE_NETWORK = "ethereum:local:test"
DEFAULT_REQUIRED_CONFIRMATIONS = 1

#
# Named accounts
#

DEPLOYER_ROLE = "deployer"
PLAYER_ROLE = "player"

DEFAULT_NAMED_ACCOUNTS = {
    DEPLOYER_ROLE: 0,
    PLAYER_ROLE: 1,
}

#
# Contracts
#

ZEYPHR_ADMIN = "ZeyphrAdmin"
ZEYPHR_MARKETPLACE = "ZeyphrMarketplace"

DEFAULT_FEE_PERCENT = 1
MIN_FEE_PERCENT = 0
MAX_FEE_PERCENT = 100
