import argparse
import logging
import os
import subprocess
import sys

# Ensure Python can import the 'sahayak' package
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from sahayak.utils.logger import setup_logging
from sahayak.chat.conversation import ChatSession
from sahayak.chat.exchange import ExchangeClient

logger = logging.getLogger("Orchestrator")

APP_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "sahayak", "app.py")


def run_console(config_path: str) -> None:
    """Run an interactive console chat against the configured model."""
    exchange = ExchangeClient.from_config(config_path)
    session = ChatSession()
    policy = exchange.policy

    print("\n💬 How can your Sahayak help you? (type 'exit' to quit)")

    while True:
        try:
            if not session.is_input_enabled(policy):
                print(f"\n⛔ You've reached the maximum number of questions. "
                      f"Please try again in {policy.cooldown_hours} hours.")
                break

            if policy is not None:
                print(f"\n(Questions remaining today: {exchange.remaining(session)})")

            question = input("You: ")
            if question.strip().lower() in ["exit", "quit"]:
                break

            if not exchange.accept(session, question):
                continue

            print("🤔 Thinking...")
            exchange.complete(session, question)
            print(f"\n🤖 Sahayak: {session.conversation.last().text}")

        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye.")
            break


def run_ui(port: int) -> int:
    """Launch the Streamlit app in a child process."""
    cmd = [sys.executable, "-m", "streamlit", "run", APP_PATH, "--server.port", str(port)]
    logger.info(f"🚀 Launching UI: {' '.join(cmd)}")
    return subprocess.call(cmd)


def main():
    """CLI entrypoint for the Sahayak chat.

    `chat` runs a console session; `ui` starts the Streamlit page.
    """
    parser = argparse.ArgumentParser(description="Sahayak.AI chat")
    parser.add_argument("--config", default="cfg/config.json", help="Path to config.json")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    subparsers.add_parser("chat", help="Chat in the terminal")

    parser_ui = subparsers.add_parser("ui", help="Start the Streamlit web UI")
    parser_ui.add_argument("--port", type=int, default=8501, help="Port to serve on (default: 8501)")

    args = parser.parse_args()

    setup_logging(args.config)

    if args.command == "chat":
        try:
            run_console(args.config)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"❌ Failed to start chat: {e}")
            sys.exit(1)

    elif args.command == "ui":
        sys.exit(run_ui(args.port))


if __name__ == "__main__":
    main()
