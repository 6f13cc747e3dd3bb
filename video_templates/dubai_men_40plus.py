#!/usr/bin/env python3

"""Ad script template for Dubai men over 40"""

from models import PTDScores, TemplateSection, TextOverlay, VideoTemplate


def get_dubai_men_40plus_template() -> VideoTemplate:
  """Gets the 40-second "Executive Edge" template
  Returns:
  template: the static template
  """
  return VideoTemplate(
      id="dubai-men-40plus",
      name="Dubai Men 40+ Executive Edge",
      target_audience="Dubai men over 40, professionals, executives",
      duration=40,
      aspect_ratio="9:16",
      hook=TemplateSection(
          duration=5,
          prompt="""
                Direct-to-camera shot of a confident, fit man in his 40s in a Dubai gym setting.
                He looks directly at camera with authority. Text overlay appears: "Dubai Men Over 40..."
                Quick zoom in on his face. High energy, pattern interrupt.
            """,
          text_overlays=[
              TextOverlay("Dubai Men Over 40", 0, 2, "bold, large"),
              TextOverlay("Stop Scrolling", 2, 1, "urgent, red"),
          ],
          conversion_words=["stop scrolling", "exhausted", "weight creep"],
      ),
      problem_agitation=TemplateSection(
          duration=10,
          prompt="""
                Show frustrated man looking in mirror, checking watch (busy schedule),
                tired at desk. Quick cuts between scenes. Text overlays highlight pain points.
                Tone: empathetic but urgent.
            """,
          text_overlays=[
              TextOverlay("Exhausted Despite Trying Everything?", 5, 3),
              TextOverlay("Body Fighting You?", 8, 2),
              TextOverlay("Nothing Works Anymore?", 10, 3),
          ],
          conversion_words=["exhausted", "fighting you", "tried everything", "sad reality"],
      ),
      solution=TemplateSection(
          duration=10,
          prompt="""
                Show transformation: Man training with professional coach (master's degree visible on wall).
                One-on-one attention. Scientific equipment. Dubai skyline in background.
                Text: "Executive Edge Protocol" appears. Confident, authoritative tone.
            """,
          text_overlays=[
              TextOverlay("Here's The Hidden Truth", 15, 2, "revelation"),
              TextOverlay("Executive Edge Protocol", 17, 3, "bold, branded"),
              TextOverlay("Master's Degree Coaches", 20, 3, "credibility"),
          ],
          conversion_words=["hidden truth", "cracked the code", "personalized", "master degree"],
      ),
      benefits=TemplateSection(
          duration=10,
          prompt="""
                Show transformation results: Man confidently presenting in boardroom,
                energetic with family, looking great in mirror. Quick, inspiring cuts.
                Emotional, aspirational tone.
            """,
          text_overlays=[
              TextOverlay("Reclaim Peak Energy", 25, 2),
              TextOverlay("Boost Career Performance", 27, 2),
              TextOverlay("Feel Confident Again", 29, 3),
          ],
          conversion_words=["reclaim", "peak energy", "confident", "permanent transformation"],
      ),
      cta=TemplateSection(
          duration=5,
          prompt="""
                Direct-to-camera shot. Man smiling confidently.
                Large text overlay with CTA. Urgent but friendly tone.
            """,
          text_overlays=[
              TextOverlay("Click Below", 35, 2, "urgent, large"),
              TextOverlay("Free Consultation", 37, 2, "value, green"),
              TextOverlay("Let's Transform You", 39, 1, "action"),
          ],
          conversion_words=["free consultation", "click below", "best shape of your life"],
      ),
      visual_style={
          "colorPalette": ["#FF4500", "#FF8C00", "#000000", "#FFFFFF"],
          "pacing": "quick cuts (2-3s per shot)",
          "transitions": "dynamic zoom, quick fade",
          "textStyle": "bold, sans-serif, high contrast",
      },
      audio_guidelines={
          "voiceTone": "authoritative yet empathetic, direct",
          "music": "high-energy, motivational, subtle background",
          "soundEffects": "whoosh for text overlays, subtle impact sounds",
      },
      optimization_score=PTDScores(
          hook_strength=90,
          problem_agitation=85,
          solution_clarity=95,
          transformation_appeal=88,
          cta_effectiveness=92,
          overall=90,
      ),
  )
