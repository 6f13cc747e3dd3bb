#!/usr/bin/env python3
"""
Example client code for the Video AI Studio HTTP API.

This demonstrates how to:
1. Upload a video and get the analysis JSON
2. Print a summary of scenes, key moments and recommendations
3. Generate a video and follow its progress stream
"""

import json
import requests
from pathlib import Path


def analyze_video_file(
    video_path: str,
    api_url: str = "http://localhost:8080",
    api_key: str = "",
    ptd_optimized: bool = False,
    extract_frames: int = 30,
) -> dict:
    """
    Upload a video file and get the analysis.

    Args:
        video_path: Path to the local video file
        api_url: Base URL of the API server
        api_key: Gemini API key (optional when the server has one)
        ptd_optimized: Request the PTD Fitness funnel scores
        extract_frames: Number of frames sent along with the video

    Returns:
        {"report_id", "report_url", "result"}
    """
    video_file = Path(video_path)
    if not video_file.exists():
        raise FileNotFoundError(f"Video file not found: {video_path}")

    print(f"Uploading video: {video_file.name} ({video_file.stat().st_size / (1024*1024):.2f} MB)")
    print("Processing... (this may take a few minutes)")

    with open(video_file, 'rb') as f:
        response = requests.post(
            f"{api_url}/api/analyze",
            files={'file': (video_file.name, f, 'video/mp4')},
            data={
                'api_key': api_key,
                'ptd_optimized': str(ptd_optimized).lower(),
                'extract_frames': str(extract_frames),
            },
            timeout=600,
        )

    if response.status_code != 200:
        print(f"Error: {response.status_code}")
        print(response.text)
        response.raise_for_status()
    return response.json()


def display_analysis_summary(data: dict):
    """Display a summary of the analysis."""
    result = data["result"]
    print("\n" + "="*60)
    print("VIDEO ANALYSIS SUMMARY")
    print("="*60)
    print(f"\nReport: {data.get('report_url')}")
    print(f"\n{result.get('summary', '')}")

    scenes = result.get('scenes', [])
    if scenes:
        avg = sum(s.get('score', 0) for s in scenes) / len(scenes)
        print(f"\nScenes: {len(scenes)} (average engagement {avg:.1f})")
        for s in scenes:
            print(f"   {s['startTime']:>6.1f}s - {s['endTime']:>6.1f}s  [{s.get('score', 0):>3}] {s.get('description', '')}")

    for t in result.get('timestamps', []):
        flag = " *" if t.get('actionable') else ""
        print(f"   {t['time']:>6.1f}s  {t.get('importance', ''):<6} {t.get('description', '')}{flag}")

    recs = sorted(result.get('recommendations', []), key=lambda r: r.get('priority', 0), reverse=True)
    if recs:
        print(f"\nRecommendations:")
        for r in recs:
            print(f"   [{r.get('priority')}/10] {r.get('type')}: {r.get('description')}")

    if result.get('ptdScores'):
        print(f"\nFunnel scores: {json.dumps(result['ptdScores'])}")
    print("\n" + "="*60)


def generate_video(prompt: str, api_url: str = "http://localhost:8080", api_key: str = "") -> str:
    """Start a generation and print the server-sent progress events.

    Returns the URL of the generated video.
    """
    with requests.post(
        f"{api_url}/api/generate_video",
        json={"prompt": prompt, "api_key": api_key, "options": {"aspectRatio": "9:16"}},
        stream=True,
        timeout=1800,
    ) as response:
        response.raise_for_status()
        for line in response.iter_lines(decode_unicode=True):
            if not line or not line.startswith("data: "):
                continue
            msg = json.loads(line[len("data: "):])
            if msg["step"] == "progress":
                print(f"   {msg['message']}")
            elif msg["step"] == "error":
                raise RuntimeError(msg["message"])
            elif msg["step"] == "done":
                return f"{api_url}{msg['video_url']}"
    raise RuntimeError("Stream ended without a result")


def example_curl():
    """Print equivalent curl commands."""
    print("""
# Analyze a video file:
curl -X POST http://localhost:8080/api/analyze \\
  -F "file=@path/to/video.mp4" \\
  -F "ptd_optimized=true" \\
  > analysis.json

# Generate a video (progress is streamed as server-sent events):
curl -N -X POST http://localhost:8080/api/generate_video \\
  -H "Content-Type: application/json" \\
  -d '{"prompt": "A sunrise run along Dubai Marina", "options": {"aspectRatio": "9:16"}}'
""")


if __name__ == "__main__":
    # Uncomment the example you want to run:

    # display_analysis_summary(analyze_video_file("path/to/your/video.mp4"))
    # print(generate_video("A confident man in his 40s training in a Dubai gym"))
    example_curl()
