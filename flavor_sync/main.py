import uvicorn
import logging
from flavor_sync.app import app
from flavor_sync.core.config import Config

# Configure logging
logging.basicConfig(
    level=logging.INFO if Config.ENVIRONMENT == "development" else logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
    ]
)
logger = logging.getLogger(__name__)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=Config.port())
