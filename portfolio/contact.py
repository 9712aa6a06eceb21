"""Contact options and the prefilled e-mails they open."""

from urllib.parse import quote

from pydantic import BaseModel

CONTACT_EMAIL = "stijnvdd2007@gmail.com"


class ContactOption(BaseModel):
    title: str
    desc: str
    subject: str
    body: str

    def mailto(self, address: str = CONTACT_EMAIL) -> str:
        return build_mailto(address, self.subject, self.body)


# encodeURIComponent leaves these marks literal
_URI_SAFE = "-_.!~*'()"


def build_mailto(address: str, subject: str, body: str) -> str:
    return (
        f"mailto:{address}"
        f"?subject={quote(subject, safe=_URI_SAFE)}"
        f"&body={quote(body, safe=_URI_SAFE)}"
    )


CONTACT_OPTIONS = [
    ContactOption(
        title="Collaboration",
        desc="Got a project idea or want to team up on something innovative?",
        subject="Collaboration Opportunity",
        body=(
            "Hey Stijn,\n\nI'd love to collaborate with you on a project! "
            "Here's what I had in mind:\n\n(Describe your idea here)\n\n"
            "Looking forward to hearing from you!"
        ),
    ),
    ContactOption(
        title="Freelance / Work",
        desc="Looking for a developer or designer? Let's build something together.",
        subject="Freelance Project Inquiry",
        body=(
            "Hi Stijn,\n\nI'm interested in working with you on a freelance basis. "
            "Here are the project details:\n\n(Specify project scope or requirements)\n\nThanks!"
        ),
    ),
    ContactOption(
        title="Ideas or Feedback",
        desc="Got a cool idea or something I could improve? I'd love to hear it!",
        subject="Idea or Feedback",
        body=(
            "Hey Stijn,\n\nI had an idea or some feedback I wanted to share with you:"
            "\n\n(Write it here)\n\nThanks for being open to suggestions!"
        ),
    ),
    ContactOption(
        title="Just Say Hi",
        desc="Want to chat or say hello? I'm always happy to connect.",
        subject="Just Saying Hi",
        body=(
            "Hey Stijn,\n\nJust wanted to say hi! Love your work and would like "
            "to connect sometime.\n\nCheers!"
        ),
    ),
]
