from .data_store import IntentStore


def build_all_tests_from_intents(store: IntentStore):
    tests = []
    for intent in store:
        for kw in intent.keywords:
            if kw.strip():
                tests.append({"q": kw.strip(), "tag": intent.name})
    return tests


def run_offline_eval(engine):
    # every keyword asked on its own, without session context
    tests = build_all_tests_from_intents(engine.context.store)

    results = []
    correct = 0
    total = len(tests)

    for t in tests:
        reply = engine.handle(t["q"], [])
        ok = reply.intent == t["tag"]
        correct += 1 if ok else 0
        results.append({
            "query": t["q"],
            "expected": t["tag"],
            "predicted": reply.intent,
            "ok": ok,
            "score": reply.score,
        })

    accuracy = correct / total if total else 0.0
    return accuracy, results
