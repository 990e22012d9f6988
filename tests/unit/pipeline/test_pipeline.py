"""End-to-end tests for AgenticPipeline over the real graph."""

import pytest

from hybrid_rag.config import AgentConfig, PipelineConfig, RetrievalConfig
from hybrid_rag.documents import Document
from hybrid_rag.errors import ConfigurationError, GraphExecutionError
from hybrid_rag.pipeline.pipeline import AgenticPipeline, Clients
from hybrid_rag.retrieval.engine import RetrievalResult
from hybrid_rag.retrieval.vectors import InMemoryVectorStore


def _config(**agent_kwargs) -> PipelineConfig:
    return PipelineConfig(agent=AgentConfig(**agent_kwargs))


class TestConstruction:
    def test_requires_planner_and_writer(self, stub_llm, keyword_embeddings):
        store = InMemoryVectorStore()
        with pytest.raises(ConfigurationError, match="planner"):
            AgenticPipeline(Clients(writer=stub_llm("x")), keyword_embeddings, store)
        with pytest.raises(ConfigurationError, match="writer"):
            AgenticPipeline(Clients(planner=stub_llm("x")), keyword_embeddings, store)

    def test_default_client_fills_roles(self, stub_llm, keyword_embeddings):
        llm = stub_llm("x")
        pipe = AgenticPipeline(Clients(default=llm), keyword_embeddings, InMemoryVectorStore())

        assert pipe.planner.llm is llm
        assert pipe.researcher.llm is llm
        assert pipe.critic.llm is llm

    def test_requires_store_without_engine(self, stub_llm, keyword_embeddings, stub_engine):
        with pytest.raises(ConfigurationError):
            AgenticPipeline(Clients(default=stub_llm("x")), keyword_embeddings, None)
        AgenticPipeline(Clients(default=stub_llm("x")), engine=stub_engine())


class TestRun:
    def test_run_produces_response(self, stub_llm, keyword_embeddings, policy_docs, shipping_plan):
        writer = stub_llm("Draft answer referencing [shipping-policy].")
        critic = stub_llm(
            '{"verdict":"approve","issues":[],"final_answer":"Approved final answer with [shipping-policy]."}'
        )
        pipe = AgenticPipeline(
            Clients(planner=stub_llm(shipping_plan), writer=writer, critic=critic),
            keyword_embeddings,
            InMemoryVectorStore(),
        )
        pipe.index_documents(*policy_docs)

        resp = pipe.run("Tell me the shipping policy timeline.")

        assert len(resp.plan.steps) == 1
        assert resp.evidence
        best = max(resp.evidence, key=lambda ev: ev.score)
        assert best.document_id == "shipping-policy"
        shipping = next(ev for ev in resp.evidence if ev.document_id == "shipping-policy")
        returns = next(ev for ev in resp.evidence if ev.document_id == "returns")
        assert shipping.score > returns.score
        assert resp.draft_answer == "Draft answer referencing [shipping-policy]."
        assert resp.final_answer == "Approved final answer with [shipping-policy]."
        assert resp.critic.verdict == "approve"
        assert writer.calls == 1
        assert critic.calls == 1

    def test_shipping_timeline_ranks_shipping_policy_first(self, stub_llm, keyword_embeddings):
        plan = (
            '{"strategy":"baseline","steps":[{"id":"step-1","goal":"shipping timeline",'
            '"questions":["shipping timeline"]}]}'
        )
        pipe = AgenticPipeline(
            Clients(planner=stub_llm(plan), writer=stub_llm("Orders ship in 2 days [shipping-policy].")),
            keyword_embeddings,
            InMemoryVectorStore(),
        )
        pipe.index_documents(
            Document(id="shipping-policy", title="Shipping Policy", content="Shipping Policy ships in 2 days"),
            Document(id="return-policy", title="Return Policy", content="Return Policy: 30 days"),
        )

        resp = pipe.run("shipping timeline")

        shipping = [ev for ev in resp.evidence if ev.document_id == "shipping-policy"]
        returns = [ev for ev in resp.evidence if ev.document_id == "return-policy"]
        assert shipping and returns
        assert max(ev.score for ev in shipping) > max(ev.score for ev in returns)
        assert max(resp.evidence, key=lambda ev: ev.score).document_id == "shipping-policy"

    def test_critic_skipped_without_client(self, stub_llm, stub_engine, shipping_plan):
        pipe = AgenticPipeline(
            Clients(planner=stub_llm(shipping_plan), writer=stub_llm("Draft.")),
            engine=stub_engine(),
        )

        resp = pipe.run("q")

        assert pipe.critic is None
        assert resp.critic is None
        assert resp.final_answer == resp.draft_answer

    def test_without_critic_final_equals_draft(self, stub_llm, keyword_embeddings):
        plan = '{"strategy":"baseline","steps":[{"id":"","goal":"Understand returns","questions":["returns policy"]}]}'
        pipe = AgenticPipeline(
            Clients(planner=stub_llm(plan), writer=stub_llm("Return answer referencing [returns].")),
            keyword_embeddings,
            InMemoryVectorStore(),
            config=_config(enable_critic=False),
        )
        pipe.index_documents(Document(id="returns", title="Return Policy", content="Return policy details."))

        resp = pipe.run("What is the return policy?")

        assert resp.critic is None
        assert resp.plan.steps[0].id == "step-1"
        assert resp.final_answer == resp.draft_answer

    def test_skips_writer_without_evidence(self, stub_llm, keyword_embeddings):
        plan = '{"strategy":"baseline","steps":[{"id":"step-1","goal":"Find escalation policy"}]}'
        writer = stub_llm("This should never be returned.")
        fallback = "没有检索到相关内容"
        pipe = AgenticPipeline(
            Clients(planner=stub_llm(plan), writer=writer),
            keyword_embeddings,
            InMemoryVectorStore(),
            config=_config(min_evidence_count=1, no_answer_message=fallback),
        )

        resp = pipe.run("请告诉我最新的升级流程？")

        assert resp.evidence == []
        assert resp.draft_answer == fallback
        assert resp.final_answer == fallback
        assert writer.calls == 0

    def test_keeps_multiple_chunks_per_document(self, stub_llm, stub_engine, aaddcc_doc, aaddcc_chunks):
        engine = stub_engine(
            results=[
                RetrievalResult(chunk=aaddcc_chunks[0], score=0.91),
                RetrievalResult(chunk=aaddcc_chunks[1], score=0.89),
            ]
        )
        pipe = AgenticPipeline(
            Clients(
                planner=stub_llm('{"strategy":"baseline","steps":[{"id":"step-1","goal":"了解AADDCC是什么","questions":[]}]} '),
                researcher=stub_llm('{"queries":["AADDCC 是什么?"]}'),
                writer=stub_llm("AADDCC 的回答。"),
            ),
            engine=engine,
        )
        pipe.index_documents(aaddcc_doc)

        resp = pipe.run("请解释 AADDCC。")

        assert len(resp.evidence) == 2
        assert any("万能药物" in ev.chunk.content for ev in resp.evidence)
        assert engine.queries == ["AADDCC 是什么?"]

    def test_empty_question_rejected(self, stub_llm, stub_engine):
        pipe = AgenticPipeline(Clients(default=stub_llm("x")), engine=stub_engine())
        with pytest.raises(ValueError):
            pipe.run("   ")

    def test_visit_limit_exceeded(self, stub_llm, stub_engine, shipping_plan):
        pipe = AgenticPipeline(
            Clients(planner=stub_llm(shipping_plan), writer=stub_llm("x")),
            engine=stub_engine(),
            config=_config(graph_max_visits=2),
        )
        with pytest.raises(GraphExecutionError):
            pipe.run("q")


class TestDocuments:
    def test_index_rejects_empty_content(self, stub_llm, stub_engine):
        pipe = AgenticPipeline(Clients(default=stub_llm("x")), engine=stub_engine())
        with pytest.raises(ValueError):
            pipe.index_documents(Document(id="blank", content="  "))

    def test_index_does_not_share_metadata(self, stub_llm, stub_engine):
        engine = stub_engine()
        pipe = AgenticPipeline(Clients(default=stub_llm("x")), engine=engine)
        doc = Document(id="d", content="text", metadata={"k": "v"})
        pipe.index_documents(doc)

        doc.metadata["k"] = "changed"
        assert engine.docs["d"].metadata["k"] == "v"

    def test_clear_and_count(self, stub_llm, keyword_embeddings, policy_docs):
        pipe = AgenticPipeline(Clients(default=stub_llm("x")), keyword_embeddings, InMemoryVectorStore())
        pipe.index_documents(*policy_docs)
        assert pipe.count_documents() == 2

        pipe.clear_documents()
        assert pipe.count_documents() == 0

    def test_config_enables_cleaning_and_summaries(self, stub_llm, keyword_embeddings):
        summarizer_llm = stub_llm('{"summary": "shipping timeline", "key_points": []}')
        config = PipelineConfig(retrieval=RetrievalConfig(clean_documents=True, summarize_chunks=True))
        pipe = AgenticPipeline(
            Clients(default=stub_llm("x"), summarizer=summarizer_llm),
            keyword_embeddings,
            InMemoryVectorStore(),
            config=config,
        )

        pipe.index_documents(Document(id="d", content="Return   policy\n\n\n\nReturn   policy"))

        assert pipe.count_documents() == 2
        assert pipe.engine.document("d").content == "Return policy"
        assert summarizer_llm.calls == 1
