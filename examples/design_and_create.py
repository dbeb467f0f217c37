#!/usr/bin/env python3
"""Design a voice, keep the first preview, and save it as a voice.

Usage:
    python design_and_create.py "Warm, friendly female, mid-20s" --name Elina
    python design_and_create.py "Deep narrator" --name Jack --model eleven_ttv_v3
"""

import argparse
import asyncio
import os
import sys

from elevenlabs_ttv import (
    ELEVEN_MULTILINGUAL_TTV_V2,
    ElevenLabsTTVClient,
    ElevenLabsTTVError,
    ErrorKind,
)


async def design_and_create(
    api_key: str,
    description: str,
    name: str,
    model: str = ELEVEN_MULTILINGUAL_TTV_V2,
    guidance_scale: int = 20,
) -> None:
    async with ElevenLabsTTVClient(api_key) as client:
        designed = await (
            client.design_voice(description)
            .model(model)
            .loudness(1.0)
            .guidance_scale(guidance_scale)
            .quality(1.0)
            .execute()
        )

        for preview in designed.previews:
            print(f"Preview {preview.generated_voice_id}: {preview.duration_secs:.1f}s")
        print(f"Preview text: {designed.text}")

        if not designed.previews:
            print("No previews were returned; nothing to create")
            return

        chosen, *rejected = designed.previews
        builder = client.create_voice(name, description, chosen.generated_voice_id)
        if rejected:
            builder = builder.played_not_selected_voice_ids(
                [p.generated_voice_id for p in rejected]
            )
        voice = await builder.execute()

    print(f"Created voice {voice.voice_id} ({voice.name})")
    print(f"Ready: {voice.is_ready()}, shared: {voice.is_shared()}")


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("description", help="Natural-language voice description")
    parser.add_argument("--name", required=True, help="Name for the created voice")
    parser.add_argument("--model", default=ELEVEN_MULTILINGUAL_TTV_V2)
    parser.add_argument("--guidance-scale", type=int, default=20)
    args = parser.parse_args()

    api_key = os.environ.get("ELEVENLABS_API_KEY")
    if not api_key:
        print("Please set ELEVENLABS_API_KEY")
        return 1

    try:
        asyncio.run(
            design_and_create(
                api_key, args.description, args.name, args.model, args.guidance_scale
            )
        )
    except ElevenLabsTTVError as e:
        if e.kind is ErrorKind.RATE_LIMITED and e.retry_after is not None:
            print(f"Rate limited, try again in {e.retry_after}s")
        else:
            print(f"Error: {e}")
        return e.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())
