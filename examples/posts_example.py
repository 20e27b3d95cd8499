#!/usr/bin/env python3
"""
Example declaring a JSONPlaceholder post resource with RestMachine Client.

This example shows how to:
1. Bind a model to REST endpoints with directive decorators
2. Leave server-assigned fields out of request bodies (exclude_from_body)
3. Map a field to a different JSON key (wire_key)
4. Fill in data before saving (before_save)

Run against the live API:
    python examples/posts_example.py

Or offline, answering from a MockTransport:
    python examples/posts_example.py --offline
"""

import asyncio
import logging
import sys

import httpx

from restmachine_client import (
    CONTENT_TYPE_JSON,
    Field,
    RequestConfig,
    RestModel,
    before_save,
    delete,
    get,
    get_collection,
    post,
    put,
)
from restmachine_client.testing import MockTransport

BASE_URL = "https://jsonplaceholder.typicode.com"


def setup_logging():
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@get(f"{BASE_URL}/posts/:id")
@get_collection(f"{BASE_URL}/posts")
@post(f"{BASE_URL}/posts")
@put(f"{BASE_URL}/posts/:id")
@delete(f"{BASE_URL}/posts/:id")
class Post(RestModel):
    id: int = Field(default=0, exclude_from_body=True)  # Assigned by the server
    user_id: int = Field(wire_key="userId")
    title: str
    body: str = ""

    @before_save
    def strip_title(self):
        self.title = self.title.strip()


def offline_handler(request: httpx.Request) -> httpx.Response:
    """Answer like JSONPlaceholder does, without the network."""
    if request.method == "GET" and request.url.path == "/posts":
        return httpx.Response(200, json=[
            {"id": 1, "userId": 1, "title": "first post", "body": "..."},
            {"id": 2, "userId": 1, "title": "second post", "body": "..."},
        ])
    if request.method == "GET":
        post_id = int(request.url.path.rsplit("/", 1)[-1])
        return httpx.Response(200, json={"id": post_id, "userId": 1, "title": f"post {post_id}", "body": "..."})
    if request.method == "POST":
        return httpx.Response(201, json={"id": 101})
    return httpx.Response(200, json={})


async def main(offline: bool = False):
    """Walk through every generated method."""
    transport = MockTransport(offline_handler) if offline else httpx.AsyncClient()
    Post.request_config = RequestConfig(default_headers=[CONTENT_TYPE_JSON], transport=transport)

    try:
        print("\n1. Fetching post 12...")
        post_12 = await Post.get_one("12")
        print(f"   {post_12.id}: {post_12.title!r} by user {post_12.user_id}")

        print("\n2. Fetching all posts...")
        posts = await Post.get_many()
        print(f"   Got {len(posts)} posts")

        print("\n3. Creating a post (id is not sent, userId is)...")
        draft = Post(user_id=1, title="  Hello  ", body="World")
        await draft.create()
        print(f"   Sent title {draft.title!r}")

        print("\n4. Updating post 12...")
        post_12.title = "Edited"
        await post_12.update()

        print("\n5. Deleting post 12...")
        await post_12.remove()

        print("\nAll requests completed successfully!")
    finally:
        if isinstance(transport, httpx.AsyncClient):
            await transport.aclose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(main(offline="--offline" in sys.argv))
