#!/usr/bin/env python3

"""Ad script template for Dubai women over 50"""

from models import PTDScores, TemplateSection, TextOverlay, VideoTemplate


def get_dubai_ladies_50plus_template() -> VideoTemplate:
  """Gets the 45-second "Transformation" template
  Returns:
  template: the static template
  """
  return VideoTemplate(
      id="dubai-ladies-50plus",
      name="Dubai Ladies 50+ Transformation",
      target_audience="Dubai women over 50, seeking confidence and energy",
      duration=45,
      aspect_ratio="9:16",
      hook=TemplateSection(
          duration=5,
          prompt="""
                Direct-to-camera shot of an elegant, confident woman in her 50s in a beautiful
                Dubai setting (e.g., balcony overlooking the marina). She looks directly at the
                camera with a warm, empathetic smile. Text overlay: "Dubai Ladies Over 50..."
            """,
          text_overlays=[
              TextOverlay("Dubai Ladies Over 50", 0, 2, "elegant, large"),
              TextOverlay("Listen Closely...", 2, 2, "intriguing, soft gold"),
          ],
          conversion_words=["listen closely", "body fighting you", "exhausted"],
      ),
      problem_agitation=TemplateSection(
          duration=10,
          prompt="""
                Show a montage of relatable struggles: a woman feeling tired while shopping,
                looking sadly at her wardrobe, feeling out of place at a social event.
                Quick, emotional cuts. Text overlays highlight pain points.
            """,
          text_overlays=[
              TextOverlay("Feel Like Your Body Is Fighting You?", 5, 3),
              TextOverlay("Tried Every Diet, But Nothing Lasts?", 8, 3),
              TextOverlay("Lost Your Spark?", 11, 2),
          ],
          conversion_words=["fighting you", "nothing lasts", "exhausted", "sad reality"],
      ),
      solution=TemplateSection(
          duration=10,
          prompt="""
                Show the transformation: The same woman working one-on-one with a supportive
                female coach. The setting is a private, high-end studio.
                Text: "Personalized Transformation Plan" appears. Tone is empowering and hopeful.
            """,
          text_overlays=[
              TextOverlay("It's Not Your Fault. It's The Method.", 15, 3, "revelation"),
              TextOverlay("Personalized Transformation Plan", 18, 3, "bold, branded"),
              TextOverlay("Designed For Your Stage of Life", 21, 3, "credibility"),
          ],
          conversion_words=["hidden truth", "cracked the code", "personalized", "master degree coaches"],
      ),
      benefits=TemplateSection(
          duration=15,
          prompt="""
                Show the results: The woman is now vibrant and energetic. She's laughing with
                friends, confidently trying on clothes, enjoying a healthy meal at a nice
                restaurant, and walking on the beach with a renewed sense of self.
                Quick, inspiring cuts.
            """,
          text_overlays=[
              TextOverlay("Feel Sexy & Confident Again", 25, 3),
              TextOverlay("Reclaim Your Peak Energy", 28, 3),
              TextOverlay("Enjoy Dubai Without Restriction", 31, 3),
              TextOverlay("Look in the Mirror and Say 'WOW'", 34, 4),
          ],
          conversion_words=["reclaim", "peak energy", "confident", "permanent transformation", "sexy"],
      ),
      cta=TemplateSection(
          duration=5,
          prompt="""
                Direct-to-camera shot. The woman smiles warmly.
                Large text overlay with a clear, inviting CTA.
            """,
          text_overlays=[
              TextOverlay("Book Your Free Consultation", 40, 3, "urgent, large, green"),
              TextOverlay("Let's Start Your Transformation", 43, 2, "action"),
          ],
          conversion_words=["free consultation", "click below", "start your transformation"],
      ),
      visual_style={
          # pinks, white, charcoal
          "colorPalette": ["#FF69B4", "#FFC0CB", "#FFFFFF", "#333333"],
          "pacing": "smooth cuts (3-4s per shot)",
          "transitions": "gentle fade, smooth zoom",
          "textStyle": "elegant, serif, high contrast",
      },
      audio_guidelines={
          "voiceTone": "empathetic, empowering, warm, and friendly",
          "music": "uplifting, inspirational, subtle background score",
          "soundEffects": "gentle chimes for text overlays, subtle whoosh",
      },
      optimization_score=PTDScores(
          hook_strength=88,
          problem_agitation=90,
          solution_clarity=92,
          transformation_appeal=95,
          cta_effectiveness=90,
          overall=91,
      ),
  )
