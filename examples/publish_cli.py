from __future__ import annotations

import requests

from pubsub_bridge.client import BridgeClient
from pubsub_bridge.communication.errors import UnknownTopicError


def main():
    client = BridgeClient()
    print(f"Connected to {client.base_url}. Type /quit to exit. Examples:")
    print("  /topics")
    print("  CONFIG_REFRESH reload")
    print("  LOG_LEVEL DEBUG")

    while True:
        user_input = input("pub> ").strip()
        if user_input.lower() in {"/quit", "quit", "exit"}:
            break
        if not user_input:
            continue

        try:
            if user_input == "/topics":
                response = ", ".join(client.topics())
            else:
                split = user_input.split(" ", 1)
                topic = split[0]
                message = split[1] if len(split) > 1 else None
                result = client.publish(topic, message)
                response = f"delivered to {result['delivered']} subscriber(s)"
                if result["failures"]:
                    response += f", failures: {result['failures']}"
        except UnknownTopicError as exc:
            response = f"Error: {exc} (valid topics: {', '.join(exc.valid_topics)})"
        except requests.RequestException as exc:
            response = f"Error: {exc}"
        print("bridge>", response)


if __name__ == "__main__":
    main()
