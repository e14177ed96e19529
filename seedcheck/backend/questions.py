from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class Section:
    key: str
    title: str
    subtitle: str


@dataclass(frozen=True)
class SubField:
    id: str
    label: str
    type: str  # "number" | "text"
    placeholder: Optional[str] = None


@dataclass(frozen=True)
class Question:
    id: str
    section: str
    label: str
    type: str  # "textarea" | "text" | "number" | "select" | "founders"
    required: bool
    help_text: Optional[str] = None
    options: Tuple[str, ...] = ()
    placeholder: Optional[str] = None
    sub_fields: Tuple[SubField, ...] = field(default_factory=tuple)

    @property
    def section_title(self) -> str:
        return SECTIONS_BY_KEY[self.section].title


@dataclass(frozen=True)
class AnswerField:
    id: str
    label: str
    type: str
    parent_id: Optional[str] = None


SECTIONS: Tuple[Section, ...] = (
    Section("A", "The Vision", "Why does this matter?"),
    Section("B", "The Wedge", "How do you get in?"),
    Section("C", "The Expansion Path", "Where does this go?"),
    Section("D", "Traction & Proof Points", "What evidence do you have?"),
    Section("E", "Team & Ask", "Who are you and what do you need?"),
)
SECTIONS_BY_KEY: Dict[str, Section] = {section.key: section for section in SECTIONS}

QUESTIONS: Tuple[Question, ...] = (
    # The Vision
    Question(
        id="a1",
        section="A",
        label="In one sentence, what does the world look like if you succeed?",
        help_text="Forces clarity of vision. Think big but be specific.",
        type="textarea",
        required=True,
        placeholder="e.g., Every small business has access to enterprise-grade financial tools...",
    ),
    Question(
        id="a2",
        section="A",
        label=(
            "What fundamental shift (technological, behavioral, regulatory) makes this possible NOW "
            "that wasn't possible 3 years ago?"
        ),
        help_text="This tests your 'why now' conviction: the market timing insight.",
        type="textarea",
        required=True,
        placeholder="e.g., The rise of open banking APIs means we can now...",
    ),
    Question(
        id="a3",
        section="A",
        label=(
            "Who is suffering most from the current way things work, and what does that suffering "
            "cost them (in dollars, time, or opportunity)?"
        ),
        help_text="Be specific about the pain. Quantify it if you can.",
        type="textarea",
        required=True,
        placeholder="e.g., Mid-market CFOs spend 20+ hours/month manually reconciling...",
    ),
    # The Wedge
    Question(
        id="b1",
        section="B",
        label=(
            "What is the smallest, most specific version of your product that your first users "
            "can't live without?"
        ),
        help_text="Your wedge is your entry point. It should be narrow and indispensable.",
        type="textarea",
        required=True,
        placeholder="e.g., A one-click invoice reconciliation tool for Shopify merchants...",
    ),
    Question(
        id="b2",
        section="B",
        label=(
            "Describe your ideal first 100 customers. Who are they specifically? "
            "(Job title, company size, industry, geography)"
        ),
        help_text="The more specific, the better. 'SMBs' is too vague.",
        type="textarea",
        required=True,
        placeholder="e.g., E-commerce ops managers at DTC brands doing $1-10M revenue, based in the US...",
    ),
    Question(
        id="b3",
        section="B",
        label=(
            "Why do these customers choose YOU over doing nothing, building it themselves, "
            "or using an existing alternative?"
        ),
        help_text="This tests differentiation AND urgency.",
        type="textarea",
        required=True,
        placeholder=(
            "e.g., Our tool saves 15 hours/month vs. their current spreadsheet workflow, "
            "and unlike Competitor X we..."
        ),
    ),
    Question(
        id="b4",
        section="B",
        label="What is your current pricing model? What does a customer pay, and what do they get?",
        help_text="Include price point and what's included. It's fine to say 'still testing pricing'.",
        type="textarea",
        required=False,
        placeholder="e.g., $99/month per seat, includes unlimited reconciliations and Slack alerts...",
        sub_fields=(
            SubField("b4_price", "Price point ($/month)", "number", "e.g., 99"),
            SubField("b4_contract", "Contract length (months)", "number", "e.g., 12"),
        ),
    ),
    # The Expansion Path
    Question(
        id="c1",
        section="C",
        label="Starting from your wedge, what are the next 2-3 products or markets you expand into?",
        help_text="Show investors you see beyond the starting point.",
        type="textarea",
        required=True,
        placeholder=(
            "e.g., After nailing invoice reconciliation, we add expense management, "
            "then full AP/AR automation..."
        ),
    ),
    Question(
        id="c2",
        section="C",
        label=(
            "What does your company look like at $10M ARR? What about $100M? "
            "How does the product/market mix change?"
        ),
        help_text="Tests your ability to think at scale.",
        type="textarea",
        required=True,
        placeholder="e.g., At $10M ARR we're the default tool for DTC finance teams. At $100M we've expanded to...",
    ),
    Question(
        id="c3",
        section="C",
        label="What is the biggest risk to your expansion path, and what would prove you wrong?",
        help_text="Intellectual honesty scores points with investors.",
        type="textarea",
        required=True,
        placeholder="e.g., The biggest risk is that Shopify builds this natively. We'd be wrong if...",
    ),
    # Traction & Proof Points
    Question(
        id="d1",
        section="D",
        label="What is your most important metric right now, and what is it?",
        help_text="Pick ONE metric that best shows your current momentum.",
        type="select",
        required=True,
        options=("MRR", "ARR", "GMV", "Active Users", "Revenue", "Other"),
        sub_fields=(SubField("d1_value", "Current value", "text", "e.g., $15,000 or 2,500 users"),),
    ),
    Question(
        id="d2",
        section="D",
        label="What has been the month-over-month growth rate of that metric over the last 3 months?",
        help_text="Enter as a percentage. It's okay if growth is inconsistent, be honest.",
        type="number",
        required=False,
        placeholder="e.g., 25",
        sub_fields=(SubField("d2_unit", "Unit", "text", "% month-over-month"),),
    ),
    Question(
        id="d3",
        section="D",
        label="How many paying customers or active users do you have today?",
        type="number",
        required=False,
        placeholder="e.g., 47",
    ),
    Question(
        id="d4",
        section="D",
        label=(
            "What is your net revenue retention rate? "
            "(If you don't know, say so. That's fine at this stage.)"
        ),
        help_text="NRR measures whether existing customers are spending more over time. Over 100% is great.",
        type="text",
        required=False,
        placeholder="e.g., 115% or 'Don't know yet'",
    ),
    Question(
        id="d5",
        section="D",
        label="What is your burn rate and current runway (months)?",
        help_text="Monthly burn = how much you spend per month. Runway = cash in bank / monthly burn.",
        type="text",
        required=True,
        placeholder="e.g., $30K/month burn, $360K in bank, 12 months runway",
        sub_fields=(
            SubField("d5_burn", "Monthly burn ($)", "number", "e.g., 30000"),
            SubField("d5_cash", "Cash in bank ($)", "number", "e.g., 360000"),
        ),
    ),
    # Team & Ask
    Question(
        id="e1",
        section="E",
        label=(
            "Who are the founders? For each: name, role, and the single most relevant thing "
            "they've done before this."
        ),
        help_text="You can add up to 4 founders.",
        type="founders",
        required=True,
    ),
    Question(
        id="e2",
        section="E",
        label="How much are you raising, and what will you use it for? Be specific.",
        help_text="Investors want to see that you've thought carefully about capital allocation.",
        type="textarea",
        required=True,
        placeholder=(
            "e.g., Raising $2M. 50% engineering (hire 3 engineers), 30% go-to-market "
            "(first sales hire + paid acquisition tests), 20% ops/runway buffer."
        ),
        sub_fields=(SubField("e2_amount", "Raise amount ($)", "number", "e.g., 2000000"),),
    ),
    Question(
        id="e3",
        section="E",
        label=(
            "What milestones will this round fund you to hit? "
            "What does the company look like when you need to raise again?"
        ),
        help_text="Show that you've thought about capital efficiency and next-round readiness.",
        type="textarea",
        required=True,
        placeholder="e.g., This round gets us to $1M ARR, 200 customers, and Series A readiness in 18 months...",
    ),
)


def iter_answer_fields() -> Iterator[AnswerField]:
    """Yield every addressable answer in catalog order, sub-fields right after their parent."""
    for question in QUESTIONS:
        yield AnswerField(question.id, question.label, question.type)
        for sub_field in question.sub_fields:
            yield AnswerField(sub_field.id, sub_field.label, sub_field.type, parent_id=question.id)


def _build_label_index() -> Dict[str, str]:
    index: Dict[str, str] = {}
    for answer_field in iter_answer_fields():
        if answer_field.id in index:
            raise RuntimeError(f"Duplicate question id in catalog: {answer_field.id}")
        index[answer_field.id] = answer_field.label
    for question in QUESTIONS:
        if question.section not in SECTIONS_BY_KEY:
            raise RuntimeError(f"Question {question.id} references unknown section {question.section}")
    return index


_LABELS_BY_ID = _build_label_index()


def get_questions_for_section(section_key: str) -> Tuple[Question, ...]:
    return tuple(question for question in QUESTIONS if question.section == section_key)


def get_question_label(question_id: str) -> str:
    return _LABELS_BY_ID.get(question_id, question_id)


def is_catalog_id(question_id: str) -> bool:
    return question_id in _LABELS_BY_ID
