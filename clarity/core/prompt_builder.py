"""Prompt template for Ask AI."""

from clarity.core.schemas_ask import ImagePart, PromptPart, SerializedContext, TextPart

SYSTEM_PROMPT_TEMPLATE = """You are an AI assistant for Clarity.ai, a customer intelligence platform. You help employees understand their customers and prospects by analyzing all available information.

Your role is to:
1. Answer questions about customers/prospects based ONLY on the provided context
2. Cite your sources by name: the transcript title, email subject, document title, or media file name
3. If information is not available in the context, clearly state that
4. Be concise but complete
5. Cite naturally (e.g., "According to the kickoff meeting transcript..." or "In the email about pricing...")

Here is all the information we have about {company_name}:

{context}

---

Now answer the following question. If you reference specific information, cite the source (transcript name, email subject, document title, or file name). If the answer isn't in the provided context, say so."""


def build_system_prompt(company_name: str, context: str) -> str:
    """Role, rules and the full text context."""
    return SYSTEM_PROMPT_TEMPLATE.format(company_name=company_name, context=context)


def build_prompt_parts(
    company_name: str,
    serialized: SerializedContext,
    question: str,
) -> list[PromptPart]:
    """
    Assemble the ordered parts sent to the model.

    Order: system prompt with context, the question, then for each image
    attachment the inline bytes followed by a caption naming it.

    Args:
        company_name: Name of the company being asked about
        serialized: Text context and image attachments
        question: The user's question

    Returns:
        Ordered list of text and image parts
    """
    parts: list[PromptPart] = [
        TextPart(text=build_system_prompt(company_name, serialized.text)),
        TextPart(text=f"Question: {question}"),
    ]

    for attachment in serialized.attachments:
        parts.append(ImagePart(data=attachment.data, mime_type=attachment.mime_type))
        parts.append(TextPart(text=f'[Image above: "{attachment.title}"]'))

    return parts
