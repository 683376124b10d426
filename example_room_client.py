#!/usr/bin/env python3
"""
Example client walking through one mentor/student session.

This example shows how to:
1. List and create exercises through the catalog REST API
2. Join the exercise's room as mentor and as student over WebSocket
3. Edit code, publish a solution and check it locally
"""

import asyncio
import websockets
import requests
import json
import logging
from typing import Optional

from codemove.client import RoomView

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class CodeMoveClient:
    def __init__(self, base_url: str = "http://localhost:8000"):
        self.base_url = base_url
        self.ws_url = base_url.replace("http", "ws") + "/ws"

    def list_codeblocks(self) -> list:
        """Get every exercise in the catalog."""
        try:
            response = requests.get(f"{self.base_url}/api/codeblocks")
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"There was an error fetching the code blocks: {e}")
            return []

    def create_codeblock(self, title: str, code: str) -> Optional[dict]:
        """Add a new exercise to the catalog."""
        try:
            response = requests.post(
                f"{self.base_url}/api/codeblocks",
                json={"title": title, "code": code}
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Error adding new CodeBlock: {e}")
            return None


class Participant:
    """One open socket plus the room view it keeps up to date."""

    def __init__(self, name: str, websocket, room_id: str):
        self.name = name
        self.websocket = websocket
        self.view = RoomView(room_id)

    async def send(self, frame: Optional[dict]):
        if frame is not None:
            await self.websocket.send(json.dumps(frame))

    async def receive(self, until: str, timeout: float = 2.0) -> dict:
        """Apply incoming messages until one of type `until` arrives."""
        while True:
            data = json.loads(await asyncio.wait_for(self.websocket.recv(), timeout))
            logger.info(f"[{self.name}] received: {data}")
            self.view.apply(data)
            if data.get("type") == until:
                return data


async def run_session(client: CodeMoveClient, room_id: str):
    async with websockets.connect(client.ws_url) as mentor_ws, websockets.connect(client.ws_url) as student_ws:
        mentor = Participant("mentor", mentor_ws, room_id)
        student = Participant("student", student_ws, room_id)

        await mentor.send(mentor.view.join_frame())
        await mentor.receive("assignRole")

        await student.send(student.view.join_frame())
        await student.receive("assignRole")
        await mentor.receive("newStudentEditor")

        await student.send(student.view.edit("let x=1"))
        await mentor.receive("codeUpdate")

        await mentor.send(mentor.view.publish("let x=1"))
        await student.receive("mentorSolution")

        if student.view.check_solution():
            print("Congratulations! You wrote the same solution as the mentor!")
        else:
            print("Your solution does not match the mentor's solution. Keep trying!")

        await mentor.send(mentor.view.leave_frame())
        await student.receive("mentorLeft")


async def main():
    """Example usage of the room protocol."""
    client = CodeMoveClient(base_url="http://localhost:8000")

    print("=== CodeMove Session Example ===\n")

    # 1. List exercises
    print("1. Listing exercises...")
    blocks = client.list_codeblocks()
    print(f"Catalog: {json.dumps(blocks, indent=2)}\n")

    # 2. Create one to work on
    print("2. Adding a new exercise...")
    block = client.create_codeblock("Variables", "// declare x")
    if block is None:
        return
    print(f"Created: {json.dumps(block, indent=2)}\n")

    # 3. Work it as mentor and student
    print("3. Running a mentor/student session in its room...")
    await run_session(client, block["id"])

    print("=== Example Complete ===")

if __name__ == "__main__":
    asyncio.run(main())
