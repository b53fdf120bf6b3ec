"""
Keyword-overlap job recommendations.

A posting's score is the share of *its* required skills that the applicant
has: ``|applicant & job| / |job|``. A posting asking for two skills that the
applicant both holds scores 1.0 however many other skills the applicant lists.
The score is not scaled by the size of the applicant's skill set.
"""

import math
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional


@dataclass(frozen=True)
class JobRecommendation:
    job_posting: object
    match_score: float

    def to_dict(self):
        return {
            'jobPosting': self.job_posting.to_dict(),
            'matchScore': self.match_score,
        }


def normalize_skills(skills: Optional[Iterable[str]]) -> FrozenSet[str]:
    """Trim, lowercase, drop blanks and dedupe"""
    if not skills:
        return frozenset()
    return frozenset(
        skill.strip().lower()
        for skill in skills
        if isinstance(skill, str) and skill.strip()
    )


def parse_skills_csv(text: Optional[str]) -> FrozenSet[str]:
    """'Java, SQL,,go ' -> {'java', 'sql', 'go'}"""
    if not text:
        return frozenset()
    return normalize_skills(text.split(','))


def round_score(value: float) -> float:
    # Half-up to two places; round() would send 0.125 to 0.12
    return math.floor(value * 100 + 0.5) / 100


def match_score(applicant_skills: FrozenSet[str], job_skills: FrozenSet[str]) -> float:
    if not job_skills:
        return 0.0
    common = sum(1 for skill in applicant_skills if skill in job_skills)
    return round_score(common / len(job_skills))


def rank_postings(applicant_skills: Iterable[str], postings: Iterable) -> List[JobRecommendation]:
    """Score every posting with skills, keep positive scores, best first.

    ``sorted`` is stable, so equal scores keep the order postings came in.
    """
    applicant = normalize_skills(applicant_skills)
    if not applicant:
        return []

    recommendations = []
    for posting in postings:
        job_skills = normalize_skills(posting.skills)
        if not job_skills:
            continue
        score = match_score(applicant, job_skills)
        if score > 0:
            recommendations.append(JobRecommendation(posting, score))

    return sorted(recommendations, key=lambda rec: rec.match_score, reverse=True)
