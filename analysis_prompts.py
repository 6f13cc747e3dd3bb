"""Prompt builders for video analysis, recommendations and video generation."""

import json

from models import (
    AnalysisOptions,
    VideoAnalysisResult,
    VideoGenerationOptions,
    VideoTemplate,
)

BASE_ANALYSIS_PROMPT = """Analyze this video comprehensively and provide a structured JSON response with the following:

1. **Summary**: A concise 2-3 sentence overview of the video content.

2. **Scenes**: Break down the video into distinct scenes with:
   - startTime (in seconds)
   - endTime (in seconds)
   - description (what's happening)
   - dominantEmotion (happy, sad, excited, calm, etc.)
   - objects (key objects visible)
   - score (0-100, how engaging this scene is)
{timestamps_section}{emotions_section}{objects_section}
{transcription_number}. **Transcription**: Full audio transcription with timestamps.

Format your response as valid JSON."""

TIMESTAMPS_SECTION = """
{n}. **Timestamps**: Key moments in the video with:
   - time (in seconds)
   - description (what happens at this moment)
   - importance (high, medium, low)
   - actionable (true/false - can this be improved?)
"""

EMOTIONS_SECTION = """
{n}. **Emotions**: Emotional analysis throughout the video:
   - timestamp (in seconds)
   - emotion (detected emotion)
   - intensity (0-100)
"""

OBJECTS_SECTION = """
{n}. **Objects**: Objects detected in the video:
   - name (object name)
   - confidence (0-100)
   - timestamps (when it appears)
"""

PTD_ANALYSIS_INSTRUCTIONS = """
**SPECIAL INSTRUCTIONS FOR PTD FITNESS AD ANALYSIS:**

Analyze this video specifically for fitness ad conversion optimization:

1. **Hook Analysis** (0-5 seconds):
   - Is there a pattern interrupt?
   - Does it directly address the target audience (e.g., "Dubai men over 40")?
   - Rate hook strength (0-100)

2. **Problem Agitation** (5-15 seconds):
   - Are pain points clearly stated?
   - Does it use conversion words like "exhausted," "stuck," "fighting you"?
   - Rate problem agitation (0-100)

3. **Solution Presentation** (15-25 seconds):
   - Is the unique mechanism clear (e.g., "Executive Edge Protocol")?
   - Does it mention credentials (master's degree coaches)?
   - Rate solution clarity (0-100)

4. **Benefits & Transformation** (25-35 seconds):
   - Are emotional benefits highlighted (e.g., "reclaim peak energy")?
   - Is there identity transformation language?
   - Rate transformation appeal (0-100)

5. **Call to Action** (35-40+ seconds):
   - Is the CTA clear and urgent?
   - Does it offer a free consultation?
   - Rate CTA effectiveness (0-100)

6. **Visual Elements**:
   - Text overlays (are they bold and readable?)
   - Color psychology (red/orange for urgency?)
   - Pacing (quick cuts vs. smooth transitions?)

7. **Audio Elements**:
   - Voice tone (authoritative yet empathetic?)
   - Background music (energetic vs. calm?)
   - Conversion words used (list them)

8. **Overall Conversion Score**: 0-100 based on V-Shred/WarriorBabe frameworks.

Report the ratings in a top-level "ptdScores" object with the numeric fields
hookStrength, problemAgitation, solutionClarity, transformationAppeal,
ctaEffectiveness and overall.

Include specific recommendations for improvement in each category."""

PTD_RECOMMENDATION_PROMPT = """Based on this video analysis, provide 5-10 specific, actionable recommendations to improve conversion rates for PTD Fitness ads targeting Dubai men/women 40+.

**Analysis Data:**
{analysis_json}

**Provide recommendations in these categories:**

1. **Hook Improvements**: How to make the first 5 seconds more compelling
2. **Problem Agitation**: How to better articulate pain points
3. **Solution Clarity**: How to strengthen the unique mechanism
4. **Transformation Language**: How to enhance emotional benefits
5. **CTA Optimization**: How to make the call-to-action more urgent
6. **Visual Enhancements**: Text overlays, color psychology, pacing
7. **Audio Improvements**: Voice tone, music, conversion words

For each recommendation:
- Type: (hook, cta, visual, audio, pacing)
- Description: What to change
- Priority: 1-10 (10 = highest impact)
- Implementation: Exact steps to implement

Format as JSON array."""

GENERIC_RECOMMENDATION_PROMPT = """Based on this video analysis, provide 5-10 actionable recommendations to improve the video's effectiveness.

**Analysis Data:**
{analysis_json}

Focus on:
1. Engagement improvements
2. Clarity enhancements
3. Pacing optimization
4. Visual/audio quality
5. Call-to-action effectiveness

Format as JSON array with: type, description, priority (1-10), implementation."""

VIDEO_GENERATION_SUFFIX = (
    ". Style: {style}. Duration: approximately {duration} seconds. "
    "High quality, professional production."
)


class AnalysisPromptGenerator:
  """Generates the prompts sent to the analysis and generation models."""

  def build_analysis_prompt(self, options: AnalysisOptions | None = None) -> str:
    """Build the analysis prompt, appending the PTD section when requested.

    Optional sections (timestamps, emotions, objects) are dropped when the
    matching option is off; section numbers stay contiguous.
    """
    options = options or AnalysisOptions()
    n = 3
    sections = {"timestamps_section": "", "emotions_section": "", "objects_section": ""}
    if options.generate_timestamps:
      sections["timestamps_section"] = TIMESTAMPS_SECTION.format(n=n)
      n += 1
    if options.analyze_emotions:
      sections["emotions_section"] = EMOTIONS_SECTION.format(n=n)
      n += 1
    if options.detect_objects:
      sections["objects_section"] = OBJECTS_SECTION.format(n=n)
      n += 1

    prompt = BASE_ANALYSIS_PROMPT.format(transcription_number=n, **sections)
    if options.ptd_fitness_optimized:
      prompt = f"{prompt}\n{PTD_ANALYSIS_INSTRUCTIONS}"
    return prompt

  def build_recommendation_prompt(
      self,
      analysis: VideoAnalysisResult,
      ptd_fitness_optimized: bool = False,
  ) -> str:
    analysis_json = json.dumps(analysis.to_dict(include_recommendations=False), indent=2)
    template = PTD_RECOMMENDATION_PROMPT if ptd_fitness_optimized else GENERIC_RECOMMENDATION_PROMPT
    return template.format(analysis_json=analysis_json)

  def build_video_generation_prompt(
      self,
      prompt: str,
      options: VideoGenerationOptions,
  ) -> str:
    return prompt.rstrip() + VIDEO_GENERATION_SUFFIX.format(
        style=options.style, duration=options.duration,
    )

  def build_template_prompt(self, template: VideoTemplate) -> str:
    """Compose one generation prompt from the five sections of a template."""
    lines = [
        f"{template.name}. A {template.duration:g}-second {template.aspect_ratio} "
        f"fitness ad for {template.target_audience}.",
    ]
    start = 0.0
    for name, section in template.sections():
      end = start + section.duration
      title = name.replace("_", " ").title()
      lines.append(f"[{start:g}s-{end:g}s] {title}: {' '.join(section.prompt.split())}")
      if section.text_overlays:
        overlays = "; ".join(f'"{o.text}" at {o.time:g}s' for o in section.text_overlays)
        lines.append(f"  Text overlays: {overlays}")
      start = end
    visual = template.visual_style
    if visual:
      lines.append(
          f"Visual style: pacing {visual.get('pacing', '')}, transitions "
          f"{visual.get('transitions', '')}, colors {', '.join(visual.get('colorPalette', []))}."
      )
    audio = template.audio_guidelines
    if audio:
      lines.append(
          f"Audio: voice {audio.get('voiceTone', '')}; music {audio.get('music', '')}."
      )
    return "\n".join(lines)


analysis_prompt_generator = AnalysisPromptGenerator()

build_analysis_prompt = analysis_prompt_generator.build_analysis_prompt
build_recommendation_prompt = analysis_prompt_generator.build_recommendation_prompt
enhance_video_prompt = analysis_prompt_generator.build_video_generation_prompt
template_to_prompt = analysis_prompt_generator.build_template_prompt
