"""Main entry point for the card reader Discord bot."""

import sys
import argparse
import logging
from pathlib import Path
from datetime import datetime

from ..config import ConfigLoader, ConfigLoadError
from .bot import CardReaderBot


def setup_logging(base_dir: Path, log_level: str = "INFO") -> Path:
    """
    Setup logging configuration with timestamped log files.
    
    Needs no config: main() calls it first and applies the configured level
    once the config is loaded.
    
    Args:
        base_dir: Directory holding the storage/logs folder
        log_level: Initial root logger level
    
    Returns:
        Path: The log file path that was created
    """
    logs_dir = base_dir / "storage" / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    
    # Create timestamped log file (new file for each session)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_file = logs_dir / f"card_reader_{timestamp}.log"
    
    # Configure logging format
    log_format = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    
    # Setup root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))
    
    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_format)
    root_logger.addHandler(console_handler)
    
    # File handler (new file for each session)
    file_handler = logging.FileHandler(
        log_file,
        encoding='utf-8'
    )
    file_handler.setFormatter(log_format)
    root_logger.addHandler(file_handler)
    
    # Reduce noise from discord.py
    logging.getLogger('discord').setLevel(logging.WARNING)
    logging.getLogger('discord.http').setLevel(logging.WARNING)
    
    return log_file


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Discord bot that reads SillyTavern character cards")
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to config.yaml (created with defaults if missing)",
    )
    args = parser.parse_args()
    
    logger = logging.getLogger(__name__)
    
    try:
        config_path = Path(args.config)
        log_file = setup_logging(config_path.resolve().parent)
        logger.info("=" * 60)
        logger.info("Card Reader Bot Starting")
        logger.info("=" * 60)
        logger.info(f"Log file: {log_file}")
        
        loader = ConfigLoader(config_path)
        config = loader.load()
        token = loader.load_bot_token()
        logging.getLogger().setLevel(getattr(logging, config.bot.log_level))
        logger.info(f"Log Level: {config.bot.log_level}")
        
        if not config.reader.enabled:
            logger.warning("Card reader is disabled in config; commands will be ignored")
        
        bot = CardReaderBot(config=config, config_loader=loader)
        print("Connecting to Discord... (Press Ctrl+C to stop)")
        bot.run(token, log_handler=None)
        
    except ConfigLoadError as e:
        print(f"\n Configuration Error:\n{e}")
        sys.exit(1)
    
    except KeyboardInterrupt:
        print("\n\nShutting down gracefully...")
        logger.info("Received shutdown signal")
        sys.exit(0)
    
    except Exception as e:
        logger.exception("Fatal error")
        print(f"\n Fatal Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
