"""
Blog Content Generation Service

Turns a headline (and optionally an image) into draft blog content:
1. With OPENAI_API_KEY configured, asks the chat-completions API for JSON
   {"content": ..., "excerpt": ...}
2. Without a key, fills a built-in entrepreneurship template chosen by
   headline keywords

The result is treated like hand-written text; callers decide whether to
flag the post as AI generated.
"""
import base64
import json
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import settings
from ..core.errors import UpstreamFailed

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 200


@dataclass
class GeneratedContent:
    content: str
    excerpt: str

    def to_dict(self) -> dict:
        return {"content": self.content, "excerpt": self.excerpt}


TOPIC_TEMPLATES = [
    {
        "keywords": ("innovation", "startup", "disrupt"),
        "body": (
            "Innovation is the cornerstone of successful entrepreneurship. Entrepreneurs must "
            "keep looking for new ways to create value and solve problems: understanding market "
            "gaps, using technology well and building solutions that can adapt to changing "
            "customer needs.\n\n"
            "Key principles for successful innovation include:\n"
            "• Customer-centric approach: start with understanding your target audience\n"
            "• Rapid prototyping: test ideas quickly and iterate on feedback\n"
            "• Scalability: build solutions that can grow with your business\n"
            "• Sustainability: consider long-term impact and environmental responsibility"
        ),
    },
    {
        "keywords": ("leadership", "team", "management"),
        "body": (
            "Effective leadership is crucial for entrepreneurial success. Building and managing a "
            "team takes more than technical expertise: founders have to inspire and guide people "
            "while making strategic decisions under uncertainty.\n\n"
            "Leadership in entrepreneurship involves several key components:\n"
            "• Vision communication: clearly articulating the mission and goals\n"
            "• Team building: recruiting the right people and fostering collaboration\n"
            "• Decision making: making informed choices with limited information\n"
            "• Adaptability: adjusting strategy as the market responds"
        ),
    },
    {
        "keywords": ("market", "customer", "research"),
        "body": (
            "Market research is fundamental to entrepreneurial success. Understanding your target "
            "market, customer needs and competitive landscape is the foundation for informed "
            "business decisions.\n\n"
            "Comprehensive market research involves multiple approaches:\n"
            "• Primary research: surveys, interviews and focus groups with real customers\n"
            "• Secondary research: industry reports and market trend analysis\n"
            "• Competitive analysis: what competitors offer and where the gaps are\n"
            "• Customer personas: detailed profiles of ideal customers"
        ),
    },
]

CLOSING = (
    "## Key Takeaways\n\n"
    "• Research and planning are fundamental to success\n"
    "• Strong relationships with customers and stakeholders matter\n"
    "• Continuous learning and adaptation are necessary\n\n"
    "## Conclusion\n\n"
    "The Centre of Entrepreneurship provides resources and support to help you apply these "
    "ideas. Entrepreneurship is about creating solutions that make a positive impact while "
    "building sustainable value."
)


def _clip_excerpt(text: str) -> str:
    text = " ".join(text.split())
    return text[:EXCERPT_LENGTH]


class ContentGeneratorService:
    """Headline to blog content, through OpenAI or the template fallback"""

    def __init__(self):
        self.api_key = settings.openai_api_key
        self.model = settings.gpt_model
        self.api_url = settings.openai_api_url

    def is_available(self) -> bool:
        """True when the OpenAI backend is configured"""
        return bool(self.api_key)

    async def generate(self, headline: str, image_bytes: Optional[bytes] = None,
                       image_type: str = "image/jpeg") -> GeneratedContent:
        headline = headline.strip()
        if not self.is_available():
            return self._from_template(headline)
        return await self._from_openai(headline, image_bytes, image_type)

    def _from_template(self, headline: str) -> GeneratedContent:
        lowered = headline.lower()
        topic = TOPIC_TEMPLATES[0]
        for candidate in TOPIC_TEMPLATES:
            if any(k in lowered for k in candidate["keywords"]):
                topic = candidate
                break

        content = f"# {headline}\n\n{topic['body']}\n\n{CLOSING}"
        excerpt = (
            f"Explore essential insights about {lowered} and discover key strategies "
            f"for entrepreneurial success in today's business landscape."
        )
        return GeneratedContent(content=content, excerpt=_clip_excerpt(excerpt))

    async def _from_openai(self, headline: str, image_bytes: Optional[bytes], image_type: str) -> GeneratedContent:
        user_content = [{"type": "text", "text": f"Headline: {headline}"}]
        if image_bytes:
            encoded = base64.b64encode(image_bytes).decode("ascii")
            user_content.append({
                "type": "image_url",
                "image_url": {"url": f"data:{image_type};base64,{encoded}"},
            })

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self._build_system_prompt()},
                {"role": "user", "content": user_content},
            ],
            "temperature": 0.7,
            "response_format": {"type": "json_object"},
        }

        logger.info("Generating content with %s", self.model)
        try:
            async with httpx.AsyncClient(timeout=60) as client:
                resp = await client.post(self.api_url, headers=headers, json=payload)
                resp.raise_for_status()
                result = resp.json()
            data = json.loads(result["choices"][0]["message"]["content"])
            content = str(data["content"]).strip()
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Content generation failed: %s", e)
            raise UpstreamFailed("AI_GENERATION_FAILED", "Content generation failed") from e

        if not content:
            raise UpstreamFailed("AI_GENERATION_FAILED", "Content generation returned no text")
        excerpt = str(data.get("excerpt") or content)
        return GeneratedContent(content=content, excerpt=_clip_excerpt(excerpt))

    def _build_system_prompt(self) -> str:
        return """You write blog posts for a university Centre of Entrepreneurship.

Given a headline (and sometimes an image), write an informative article
of 400-700 words in Markdown, starting with the headline as a "# " title.
Keep the tone practical and encouraging for student founders.

Output format (JSON):
{
  "content": "# Headline\\n\\nArticle body...",
  "excerpt": "One or two sentences summarising the article, at most 200 characters."
}"""


content_generator = ContentGeneratorService()
