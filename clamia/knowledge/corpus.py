"""
Therapy knowledge base - Static technique passages and chunking.
"""

from typing import Iterable, List

from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..models import KnowledgeChunk

CHUNK_SIZE = 1000
CHUNK_OVERLAP = 200

THERAPY_CONTENT: List[KnowledgeChunk] = [
    # Anxiety management
    KnowledgeChunk(
        text="When dealing with anxiety, it's important to practice deep breathing exercises. Inhale for 4 counts, hold for 4, and exhale for 4. This helps activate the parasympathetic nervous system and reduce physical symptoms of anxiety.",
        metadata={"type": "anxiety", "technique": "breathing"},
    ),
    KnowledgeChunk(
        text="Grounding techniques can help manage anxiety in the moment. The 5-4-3-2-1 technique involves identifying 5 things you can see, 4 things you can touch, 3 things you can hear, 2 things you can smell, and 1 thing you can taste.",
        metadata={"type": "anxiety", "technique": "grounding"},
    ),
    KnowledgeChunk(
        text="Progressive muscle relaxation is an effective anxiety management technique. Systematically tense and relax different muscle groups, starting from your toes and moving up to your head.",
        metadata={"type": "anxiety", "technique": "relaxation"},
    ),

    # Depression support
    KnowledgeChunk(
        text="For depression, maintaining a regular sleep schedule and engaging in physical activity can help improve mood. Even a 10-minute walk can release endorphins and improve your mental state.",
        metadata={"type": "depression", "technique": "lifestyle"},
    ),
    KnowledgeChunk(
        text="Behavioral activation is a key technique for depression. Break down daily activities into small, manageable steps and gradually increase engagement in pleasurable activities.",
        metadata={"type": "depression", "technique": "behavioral"},
    ),
    KnowledgeChunk(
        text="Cognitive restructuring helps with depression by identifying and challenging negative thought patterns. Ask yourself: 'Is this thought helpful? Is it based on facts? What's a more balanced way to look at this?'",
        metadata={"type": "depression", "technique": "cognitive"},
    ),

    # Relationship counseling
    KnowledgeChunk(
        text="In relationship counseling, active listening involves giving full attention, reflecting back what you hear, and asking clarifying questions. This helps build understanding and trust between partners.",
        metadata={"type": "relationships", "technique": "communication"},
    ),
    KnowledgeChunk(
        text="The 'I' statement technique helps express feelings without blaming: 'I feel [emotion] when [specific situation] because [reason].' This promotes constructive dialogue and reduces defensiveness.",
        metadata={"type": "relationships", "technique": "communication"},
    ),
    KnowledgeChunk(
        text="Setting healthy boundaries in relationships involves clearly communicating your needs, limits, and expectations. It's important to be consistent and respectful when enforcing boundaries.",
        metadata={"type": "relationships", "technique": "boundaries"},
    ),

    # Stress management
    KnowledgeChunk(
        text="Time management is crucial for stress reduction. Use the Eisenhower Matrix to prioritize tasks: urgent and important, important but not urgent, urgent but not important, and neither urgent nor important.",
        metadata={"type": "stress", "technique": "management"},
    ),
    KnowledgeChunk(
        text="Mindfulness meditation can reduce stress by bringing attention to the present moment. Start with just 5 minutes daily, focusing on your breath and gently bringing your mind back when it wanders.",
        metadata={"type": "stress", "technique": "mindfulness"},
    ),
    KnowledgeChunk(
        text="Self-care is essential for stress management. Create a daily routine that includes adequate sleep, healthy eating, regular exercise, and activities you enjoy.",
        metadata={"type": "stress", "technique": "self-care"},
    ),

    # Grief support
    KnowledgeChunk(
        text="The grieving process is unique to each person. Allow yourself to feel all emotions without judgment. There's no 'right' way to grieve, and healing takes time.",
        metadata={"type": "grief", "technique": "emotional"},
    ),
    KnowledgeChunk(
        text="Creating rituals can help process grief. This might include writing letters to your loved one, creating a memory book, or establishing new traditions to honor their memory.",
        metadata={"type": "grief", "technique": "ritual"},
    ),
    KnowledgeChunk(
        text="Self-compassion is crucial during grief. Treat yourself with the same kindness you would offer a friend, acknowledging that grief is a natural response to loss.",
        metadata={"type": "grief", "technique": "self-compassion"},
    ),

    # Self-esteem building
    KnowledgeChunk(
        text="Challenge negative self-talk by identifying cognitive distortions like all-or-nothing thinking, overgeneralization, and mental filtering. Replace them with more balanced thoughts.",
        metadata={"type": "self-esteem", "technique": "cognitive"},
    ),
    KnowledgeChunk(
        text="Practice self-compassion by treating yourself with the same kindness you'd show a friend. Acknowledge your struggles without judgment and recognize that imperfection is part of being human.",
        metadata={"type": "self-esteem", "technique": "self-compassion"},
    ),
    KnowledgeChunk(
        text="Set realistic goals and celebrate small achievements. Break larger goals into manageable steps and acknowledge your progress, no matter how small.",
        metadata={"type": "self-esteem", "technique": "goal-setting"},
    ),

    # Crisis support
    KnowledgeChunk(
        text="If someone expresses thoughts of self-harm, stay calm and listen without judgment. Ask directly about their intentions and ensure they're safe. Connect them with emergency services if needed.",
        metadata={"type": "crisis", "technique": "intervention"},
    ),
    KnowledgeChunk(
        text="During a panic attack, help the person focus on their breathing. Guide them through slow, deep breaths and remind them that the attack will pass. Stay present and offer reassurance.",
        metadata={"type": "crisis", "technique": "support"},
    ),
    KnowledgeChunk(
        text="For acute stress, use the STOP technique: Stop, Take a step back, Observe your thoughts and feelings, Proceed mindfully. This helps create space between the stressor and your response.",
        metadata={"type": "crisis", "technique": "coping"},
    ),
]


def chunk_corpus(
    entries: Iterable[KnowledgeChunk],
    chunk_size: int = CHUNK_SIZE,
    chunk_overlap: int = CHUNK_OVERLAP,
) -> List[KnowledgeChunk]:
    """
    Split corpus entries into overlapping chunks, keeping each entry's metadata.

    Args:
        entries: Knowledge base entries
        chunk_size: Maximum characters per chunk
        chunk_overlap: Characters shared between consecutive chunks

    Returns:
        Chunks in corpus order
    """
    splitter = RecursiveCharacterTextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
    chunks: List[KnowledgeChunk] = []
    for entry in entries:
        for piece in splitter.split_text(entry.text):
            chunks.append(KnowledgeChunk(text=piece, metadata=dict(entry.metadata)))
    return chunks
